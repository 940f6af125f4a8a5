"""
flowgraph.validation - Save-time structural validation of flows
"""

from flowgraph.validation.flow import ValidationResult, format_status, validate

__all__ = [
    "ValidationResult",
    "format_status",
    "validate",
]
