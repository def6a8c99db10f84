# ecogest/core/exceptions.py
"""Custom exceptions for the EcoGest application."""
import logging
from typing import Any, Dict, Optional, Union

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class EcoGestException(HTTPException):
    """Base exception for EcoGest application."""
    def __init__(
        self,
        status_code: int,
        detail: Union[str, Dict[str, Any]],
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(EcoGestException):
    """Resource not found."""
    def __init__(self, resource: str, id: Any = None):
        message = f"{resource} not found"
        if id:
            message += f" with id: {id}"
        super().__init__(status_code=404, detail=message)


class SchoolNotFound(NotFoundError):
    def __init__(self, id: Any = None):
        super().__init__("School", id)


class DuplicateError(EcoGestException):
    """Unique field already taken."""
    def __init__(self, field: str, value: str, resource: str = "record"):
        super().__init__(
            status_code=409,
            detail={
                "error": f"Duplicate {field}",
                "message": f"A {resource} with this {field} already exists",
                "field": field,
                "value": value
            }
        )


class BadRequestError(EcoGestException):
    def __init__(self, message: str = "Bad request"):
        super().__init__(status_code=400, detail=message)


class IdentifierNotAllowed(BadRequestError):
    """Administrators sign in with their personal email, never a matricule."""
    def __init__(self):
        super().__init__("Administrators use their email address to sign in")


class ValidationError(EcoGestException):
    """Exception raised for validation errors."""
    def __init__(self, message: str, field: Optional[str] = None):
        detail = {"error": "Validation Error", "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=422, detail=detail)


class AuthenticationError(EcoGestException):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            status_code=401,
            detail=message,
            headers={"WWW-Authenticate": "Bearer"}
        )


class PermissionDenied(EcoGestException):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(status_code=403, detail=message)


class PaymentGatewayError(EcoGestException):
    def __init__(self, message: str):
        super().__init__(
            status_code=502,
            detail={"error": "Payment Gateway Error", "message": message}
        )


class DatabaseError(EcoGestException):
    """Exception raised for database errors."""
    def __init__(self, message: str):
        super().__init__(
            status_code=500,
            detail={
                "error": "Database Error",
                "message": message
            }
        )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - Path: {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )
