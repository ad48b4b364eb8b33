# Quill Command Line Engine — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for Quill."""
import logging

logger: logging.Logger = logging.getLogger("quill")
