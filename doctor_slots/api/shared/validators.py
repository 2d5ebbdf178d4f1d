"""
Slot Management Validators

Input sanitization for the slot management endpoint.
Format checks for dates/durations live in the scheduling engine (dispatch.py);
these guard identifiers and free text before they reach the engine.
"""

import re
import frappe
from frappe import _

ID_FIELDS = ("slot_id", "slotId", "doctor_id", "doctorId")
TEXT_FIELDS = {"slot_type": 140, "slotType": 140, "location": 140, "notes": 1000}


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a document name (ID).

    Ensures the name is not too long and doesn't contain injection patterns.

    Args:
        name: Document name to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated document name

    Raises:
        frappe.ValidationError: If name is invalid
    """
    if not name:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    name = str(name).strip()

    # Length check
    if len(name) > 140:
        frappe.throw(_("{0} is too long").format(field_name), frappe.ValidationError)

    # Block obvious injection attempts
    dangerous_patterns = [
        r"<script",
        r"javascript:",
        r"onclick",
        r"onerror",
        r"SELECT\s+",
        r"INSERT\s+",
        r"UPDATE\s+",
        r"DELETE\s+",
        r"DROP\s+",
        r"UNION\s+",
        r"--",
        r";",
    ]

    for pattern in dangerous_patterns:
        if re.search(pattern, name, re.IGNORECASE):
            frappe.throw(_("Invalid {0}").format(field_name), frappe.ValidationError)

    return name


def sanitize_string(value: str, max_length: int = 500) -> str:
    """
    General string sanitization.

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        str: Sanitized string (None if empty)
    """
    if not value:
        return None

    value = str(value).strip()

    # Truncate if too long
    if len(value) > max_length:
        value = value[:max_length]

    # Remove null bytes and other control characters
    value = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    return value


def validate_text_length(value: str, field_name: str, max_length: int) -> str:
    """
    Sanitize free text, rejecting values over max_length.

    Returns:
        str: Sanitized string (None if empty)

    Raises:
        frappe.ValidationError: If the value is too long
    """
    if value and len(str(value).strip()) > max_length:
        frappe.throw(
            _("{0} is too long (maximum {1} characters)").format(field_name, max_length),
            frappe.ValidationError
        )

    return sanitize_string(value, max_length)


def clean_slot_params(params: dict) -> dict:
    """
    Sanitize the flat parameter bag of a slot action.

    Identifiers are validated only when present: missing fields are
    reported by the engine with the action-specific message.
    Free text longer than its limit is rejected, not truncated.

    Raises:
        frappe.ValidationError: If an identifier or text field is invalid
    """
    cleaned = dict(params)

    for field_name in ID_FIELDS:
        if cleaned.get(field_name) not in (None, ""):
            cleaned[field_name] = validate_docname(cleaned[field_name], field_name)

    for field_name, max_length in TEXT_FIELDS.items():
        if field_name in cleaned:
            cleaned[field_name] = validate_text_length(cleaned[field_name], field_name, max_length)

    return cleaned
