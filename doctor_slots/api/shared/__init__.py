"""
Shared utilities for the Doctor Slots API.
"""

from .validators import (
    clean_slot_params,
    sanitize_string,
    validate_docname,
    validate_text_length,
)

__all__ = [
    "clean_slot_params",
    "sanitize_string",
    "validate_docname",
    "validate_text_length",
]
