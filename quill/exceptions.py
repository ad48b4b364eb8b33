# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used by the Quill command line engine.

Only programmer mistakes are raised. Malformed user input never raises: it is
contained inside a `Conversion` carrying an ERROR or INCOMPLETE `Status` so the
host can keep rendering partial state while the user types.

Exception Hierarchy:
- QuillError
    ├── CommandRegistrationError
    ├── TypeRegistrationError
    └── MisuseError
"""


class QuillError(Exception):
    """Base exception for the Quill engine."""


class CommandRegistrationError(QuillError):
    """Raised when a command or parameter spec is malformed at registration time."""


class TypeRegistrationError(QuillError):
    """Raised when a type spec cannot be registered or instantiated."""


class MisuseError(QuillError):
    """Raised when engine internals are called out of order or with bad inputs."""
