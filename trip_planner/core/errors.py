from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIError(HTTPException):
    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.details = details


class NotFoundError(APIError):
    """Raised for ids that do not exist *or* belong to another owner; the two cases are never told apart."""

    def __init__(self, message: str = "Trip not found or not authorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_404_NOT_FOUND, "NOT_FOUND", message, details)


class ValidationError(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR", message, details)


class UnauthenticatedError(APIError):
    def __init__(self, message: str = "Authentication required", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_401_UNAUTHORIZED, "UNAUTHENTICATED", message, details)


class MalformedItinerary(APIError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, "MALFORMED_ITINERARY", message, details)


class GenerationUnavailable(APIError):
    def __init__(self, message: str = "Itinerary generation service is unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, "GENERATION_UNAVAILABLE", message, details)


class GenerationEmpty(APIError):
    def __init__(self, message: str = "Itinerary generation returned no text", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_502_BAD_GATEWAY, "GENERATION_EMPTY", message, details)


class StoreUnavailable(APIError):
    def __init__(self, message: str = "Trip storage is unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(status.HTTP_503_SERVICE_UNAVAILABLE, "STORE_UNAVAILABLE", message, details)


def error_content(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"success": False, "error": {"code": code, "message": message, "details": details}}
