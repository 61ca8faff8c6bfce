"""
SNAP Exception Hierarchy

Every error raised by SNAP code derives from SNAPError, which carries a
machine-readable code and a context dict so callers can log structured
details or hand a short message to the user.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class SNAPError(Exception):
    """
    Base exception class for all SNAP errors.

    Attributes
    ----------
    message : str
        Human-readable error message
    error_code : str
        Machine-readable error code for categorization
    context : Dict[str, Any]
        Additional error context and metadata
    timestamp : datetime
        When the error occurred
    cause : Optional[Exception]
        Original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "snap_error",
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})  # copy, callers may reuse theirs
        self.timestamp = datetime.now(timezone.utc)
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
            "exception_type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

class IdentityProviderError(SNAPError):
    """Raw failure reported by the managed identity provider."""

    def __init__(
        self,
        code: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=message or f"Identity provider error: {code}",
            error_code="identity_provider_error",
            context={"provider_code": code, "status_code": status_code},
            cause=cause,
        )
        self.code = code
        self.status_code = status_code


class AuthError(SNAPError):
    """
    Categorized authentication failure.

    `category` is one of invalid-credential, invalid-email,
    email-already-in-use, weak-password or unknown; `user_message` is the
    short string shown to the user.
    """

    def __init__(
        self,
        category: str,
        user_message: str,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message=user_message,
            error_code=f"auth/{category}",
            context={"category": category},
            cause=cause,
        )
        self.category = category
        self.user_message = user_message


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class StoreError(SNAPError):
    """A document store operation failed."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        doc_id: Optional[str] = None,
        operation: Optional[str] = None,
        error_code: str = "store_error",
        cause: Optional[Exception] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if collection:
            context["collection"] = collection
        if doc_id:
            context["doc_id"] = doc_id
        if operation:
            context["operation"] = operation
        super().__init__(message=message, error_code=error_code, context=context, cause=cause)
        self.collection = collection
        self.doc_id = doc_id
        self.operation = operation


class DocumentNotFound(StoreError):
    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(
            message=f"No document '{doc_id}' in '{collection}'",
            collection=collection,
            doc_id=doc_id,
            operation="update",
            error_code="document_not_found",
        )


class DocumentShapeError(StoreError):
    """A stored document could not be turned into an entity."""

    def __init__(self, collection: str, doc_id: str, reason: str, cause: Optional[Exception] = None) -> None:
        super().__init__(
            message=f"Malformed document '{doc_id}' in '{collection}': {reason}",
            collection=collection,
            doc_id=doc_id,
            operation="read",
            error_code="document_shape_error",
            cause=cause,
        )
        self.reason = reason


__all__ = [
    "SNAPError",
    "IdentityProviderError",
    "AuthError",
    "StoreError",
    "DocumentNotFound",
    "DocumentShapeError",
]
