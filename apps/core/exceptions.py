"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom exceptions for the PFMS system. These provide
             specific error codes for ledger and lifecycle violations.
-------------------------------------------------------------------------
"""
from typing import Optional


class PFMSException(Exception):
    """Base exception for all PFMS specific errors."""

    error_code: str = "ERR_PFMS_GENERIC"
    default_message: str = "An error occurred in the PFMS system."
    status_code: int = 400

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        """
        Initialize PFMS exception.

        Args:
            message: Custom error message. If None, uses default_message.
            details: Additional context dictionary for the caller.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


class ValidationException(PFMSException):
    """Raised for malformed input: negative amounts, missing fields, bad periods."""

    error_code = "ERR_VALIDATION"
    default_message = "The submitted data is invalid."
    status_code = 400


class ConstraintViolationException(PFMSException):
    """Raised when an operation would break a lifecycle invariant."""

    error_code = "ERR_CONSTRAINT_VIOLATION"
    default_message = "This operation conflicts with existing records."
    status_code = 409


class PeriodMismatchException(PFMSException):
    """Raised when an expenditure date falls outside its claimed period window."""

    error_code = "ERR_PERIOD_MISMATCH"
    default_message = "The expenditure date does not fall within the selected period."
    status_code = 400


class NotFoundException(PFMSException):
    """Raised when a referenced project, field or entry does not exist."""

    error_code = "ERR_NOT_FOUND"
    default_message = "The requested record was not found."
    status_code = 404
