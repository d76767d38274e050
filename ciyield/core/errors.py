"""CIYield Error Hierarchy.

Raised only at the input boundary. The estimators themselves never raise for
input that matches the documented workflow shape.
"""

from __future__ import annotations


class CIYieldError(Exception):
    """Base error for all CIYield exceptions."""

    code = "CIYIELD_ERROR"

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidWorkflowError(CIYieldError):
    """A workflow record does not have the `{name, parsed}` shape."""

    code = "INVALID_WORKFLOW"

    def __init__(self, message: str, index: int = None, field: str = None):
        super().__init__(message, {"index": index, "field": field})
        self.index = index
        self.field = field


class InvalidOptionsError(CIYieldError):
    """Estimation overrides are unknown, negative or non-numeric."""

    code = "INVALID_OPTIONS"

    def __init__(self, message: str, option: str = None, value=None):
        super().__init__(message, {"option": option, "value": value})
        self.option = option
        self.value = value
