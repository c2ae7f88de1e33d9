"""Exception classes for the Vendor Billing SDK"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from vendor_billing.models.api import ApiResponse


class BillingErrorCategory(str, Enum):
    """Billing error category codes"""
    VALIDATION = "VAL"
    NETWORK = "NET"
    CONFIG = "CONFIG"
    API = "API"
    DOCUMENT = "DOC"
    UNKNOWN = "UNKNOWN"


class BillingError(Exception):
    """
    Base exception for billing errors

    All errors in the SDK extend from this class.
    Provides consistent error handling and categorization.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> BillingErrorCategory:
        """Determine error category from code"""
        if not code:
            return BillingErrorCategory.UNKNOWN

        if code.startswith("VAL"):
            return BillingErrorCategory.VALIDATION
        if code.startswith("NET"):
            return BillingErrorCategory.NETWORK
        if code.startswith("CONFIG"):
            return BillingErrorCategory.CONFIG
        if code.startswith("API"):
            return BillingErrorCategory.API
        if code.startswith("DOC"):
            return BillingErrorCategory.DOCUMENT

        return BillingErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: BillingErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ValidationError(BillingError):
    """Validation error"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)
        self.field = field


class NetworkError(BillingError):
    """
    Network error for HTTP transport layer failures
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        network_code: str = "NET10",
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=network_code, status_code=status_code)
        self.network_code = network_code
        self.retryable = retryable

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "NetworkError":
        """Create a timeout error"""
        return cls(message, status_code=408, network_code="NET01", retryable=True)

    @classmethod
    def connection_refused(
        cls, message: str = "Connection refused"
    ) -> "NetworkError":
        """Create a connection refused error"""
        return cls(message, network_code="NET02", retryable=True)

    @classmethod
    def circuit_breaker_open(cls, retry_after_seconds: int) -> "NetworkError":
        """Create a circuit breaker open error"""
        return cls(
            f"Circuit breaker is open. Retry after {retry_after_seconds} seconds",
            status_code=503,
            network_code="NET05",
            retryable=False,
        )

    @classmethod
    def ssl_error(cls, message: str = "SSL/TLS error") -> "NetworkError":
        """Create an SSL error"""
        return cls(message, network_code="NET04", retryable=False)


class ConfigError(BillingError):
    """Configuration error"""

    def __init__(
        self,
        message: str,
        code: str = "CONFIG01",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)


class ApiError(BillingError):
    """
    Error reported by the billing API inside a well-formed envelope

    Raised when the backend answers with ``success: false``. The parsed
    envelope is kept on ``response`` so callers can inspect field errors.
    """

    def __init__(
        self,
        message: str,
        response: Optional["ApiResponse"] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message, code="API_ERROR", status_code=status_code)
        self.response = response


class DocumentStateError(BillingError):
    """Operation not allowed in the document's current status"""

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="DOC_STATE",
            details={"status": status} if status else None,
        )
        self.status = status
