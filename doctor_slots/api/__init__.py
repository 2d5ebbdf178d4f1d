"""
Doctor Slots API

Structure:
    api/
    ├── __init__.py              # This file
    ├── slot_management.py       # Action-dispatch endpoint
    └── shared/                  # Shared utilities
        ├── __init__.py
        └── validators.py        # Input sanitization

Usage:
    frappe.call("doctor_slots.api.slot_management.handle_slot_action", ...)
"""

from . import shared

__all__ = [
    "shared",
]
