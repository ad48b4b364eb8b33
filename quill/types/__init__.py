"""
Quill Command Line Engine

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .base import Type, TypeKind, TypeRegistry, TypeSpec
from .basic import (
    BUILTIN_TYPES,
    ArrayType,
    BlankType,
    BooleanType,
    DeferredType,
    NumberType,
    SelectionType,
    StringType,
)

__all__ = [
    "Type",
    "TypeKind",
    "TypeRegistry",
    "TypeSpec",
    "BUILTIN_TYPES",
    "ArrayType",
    "BlankType",
    "BooleanType",
    "DeferredType",
    "NumberType",
    "SelectionType",
    "StringType",
]
