"""
HTTP transport layer for the billing API
Handles retries with backoff, the circuit breaker, interceptors,
request tracing and audit entries over a pooled requests session
"""

import time
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    List,
    Optional,
    TypeVar,
    Union,
)

import requests
from requests.adapters import HTTPAdapter

from vendor_billing.client.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)
from vendor_billing.config.billing_config import BillingConfig
from vendor_billing.exceptions import ApiError, BillingError, NetworkError
from vendor_billing.models.api import ApiResponse


T = TypeVar("T")

logger = logging.getLogger(__name__)

# Sensitive fields that should be redacted in logs
SENSITIVE_FIELDS = [
    "authorization",
    "token",
    "password",
    "credentials",
    "bank_account_number",
    "bank_iban",
]

RETRYABLE_STATUSES = frozenset([408, 429, 500, 502, 503, 504])

MAX_RETRY_DELAY_MS = 16000

REDACTED = "[REDACTED]"


class HttpMethod(str, Enum):
    """HTTP method types supported"""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


@dataclass
class HttpRequestOptions:
    """Per-request overrides"""
    headers: Optional[Dict[str, str]] = None
    params: Optional[Dict[str, Union[str, int, bool]]] = None
    timeout: Optional[int] = None  # milliseconds
    skip_retry: bool = False
    raw: bool = False  # return the body as bytes, undecoded


@dataclass
class HttpResponse(Generic[T]):
    """HTTP response wrapper"""
    data: T
    status: int
    headers: Dict[str, str]
    duration: int  # milliseconds
    request_id: str


@dataclass
class HttpAuditEntry:
    """Audit log entry for one request attempt"""
    timestamp: str
    request_id: str
    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[Any] = None
    response: Optional[Dict[str, Any]] = None
    duration: int = 0
    success: bool = False
    error: Optional[str] = None
    retry_attempt: Optional[int] = None


RequestInterceptor = Callable[[requests.PreparedRequest], requests.PreparedRequest]
ResponseInterceptor = Callable[[requests.Response], requests.Response]


def redact(value: Any) -> Any:
    """Mask values whose key names look sensitive, recursing into containers"""
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, dict):
        return {
            key: REDACTED
            if any(field in str(key).lower() for field in SENSITIVE_FIELDS)
            else redact(item)
            for key, item in value.items()
        }
    return value


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _status_of(error: Exception) -> Optional[int]:
    if isinstance(error, requests.exceptions.HTTPError) and error.response is not None:
        return error.response.status_code
    if isinstance(error, BillingError):
        return error.status_code
    return None


class HttpClient:
    """
    HTTP Client for the billing API

    Requests are sent relative to ``config.api_url`` with the bearer token
    and a per-attempt ``X-Request-ID`` header. Transport failures and
    408/429/5xx answers are retried with exponential backoff and counted by
    the circuit breaker. Other 4xx answers fail immediately as ``ApiError``.

    Example:
        >>> config = BillingConfig(api_url="https://api.example.com", access_token="...")
        >>> client = HttpClient(config)
        >>> response = client.get("/api/vendor/tax-rates")
        >>> print(response.data)
    """

    def __init__(
        self,
        config: BillingConfig,
        circuit_breaker_config: Optional[CircuitBreakerConfig] = None,
    ) -> None:
        """
        Create a new HTTP client instance

        Args:
            config: Resolved billing configuration
            circuit_breaker_config: Optional circuit breaker configuration
        """
        self.config = config
        self.breaker = CircuitBreaker(circuit_breaker_config or CircuitBreakerConfig())

        self._request_interceptors: List[RequestInterceptor] = []
        self._response_interceptors: List[ResponseInterceptor] = []
        self._audit_log_callback: Optional[Callable[[HttpAuditEntry], None]] = None

        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self.set_access_token(config.access_token)

        # Retries are driven by _send_with_retry, not urllib3
        adapter = HTTPAdapter(pool_connections=10, pool_maxsize=10, max_retries=0)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    def set_access_token(self, token: Optional[str]) -> None:
        """Replace the bearer token sent with each request"""
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        else:
            self._session.headers.pop("Authorization", None)

    def add_request_interceptor(self, interceptor: RequestInterceptor) -> None:
        self._request_interceptors.append(interceptor)

    def add_response_interceptor(self, interceptor: ResponseInterceptor) -> None:
        self._response_interceptors.append(interceptor)

    def set_audit_log_callback(
        self, callback: Callable[[HttpAuditEntry], None]
    ) -> None:
        """Receive an HttpAuditEntry for every attempt when auditing is on"""
        self._audit_log_callback = callback

    def _new_request_id(self) -> str:
        millis = format(int(time.time() * 1000), "x")
        return f"billing-{millis}-{uuid.uuid4().hex[:8]}"

    def _backoff(self, attempt: int) -> float:
        """Seconds to wait before retry ``attempt`` (0-based), capped at 16s"""
        delay_ms = min(self.config.retry_delay * (2 ** attempt), MAX_RETRY_DELAY_MS)
        return delay_ms / 1000.0

    def _is_retryable(self, error: Exception) -> bool:
        if isinstance(error, NetworkError):
            return error.retryable
        status = _status_of(error)
        if status is not None:
            return status in RETRYABLE_STATUSES
        return isinstance(error, requests.exceptions.RequestException)

    def _to_billing_error(
        self, error: Exception, response: Optional[requests.Response]
    ) -> BillingError:
        """Map transport and HTTP failures onto the SDK's error types"""
        if isinstance(error, BillingError):
            return error
        if isinstance(error, requests.exceptions.Timeout):
            return NetworkError.timeout()
        if isinstance(error, requests.exceptions.SSLError):
            return NetworkError.ssl_error(f"SSL/TLS error: {error}")
        if isinstance(error, requests.exceptions.ConnectionError):
            return NetworkError.connection_refused(f"Connection error: {error}")

        if isinstance(error, requests.exceptions.HTTPError) and response is not None:
            try:
                envelope = ApiResponse.model_validate(response.json())
            except ValueError:
                return ApiError(str(error), status_code=response.status_code)

            if envelope.error_message or envelope.errors:
                message = envelope.get_error_message()
            else:
                message = envelope.message or str(error)
            return ApiError(message, response=envelope, status_code=response.status_code)

        return BillingError(f"Request error: {error}", cause=error)

    def _audit(
        self,
        audit_headers: Dict[str, str],
        method: HttpMethod,
        url: str,
        body: Optional[Any],
        request_id: str,
        started: float,
        attempt: int,
        response: Optional[requests.Response] = None,
        error: Optional[Exception] = None,
        raw: bool = False,
    ) -> None:
        if not (self.config.enable_audit_log and self._audit_log_callback):
            return

        response_data = None
        if response is not None:
            if raw and error is None:
                body = f"<{len(response.content)} bytes>"
            else:
                body = redact(_response_body(response))
            response_data = {"statusCode": response.status_code, "body": body}

        self._audit_log_callback(HttpAuditEntry(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            request_id=request_id,
            method=method.value,
            url=url,
            headers=redact(audit_headers),
            body=redact(body),
            response=response_data,
            duration=int((time.time() - started) * 1000),
            success=error is None,
            error=str(error) if error else None,
            retry_attempt=attempt or None,
        ))

    def _send_once(
        self,
        method: HttpMethod,
        url: str,
        data: Optional[Any],
        options: HttpRequestOptions,
        request_id: str,
    ) -> requests.Response:
        headers = {"X-Request-ID": request_id}
        headers.update(options.headers or {})

        prepared = self._session.prepare_request(requests.Request(
            method=method.value,
            url=url,
            headers=headers,
            params=options.params,
            json=data,
        ))
        for interceptor in self._request_interceptors:
            prepared = interceptor(prepared)

        timeout = (options.timeout or self.config.timeout) / 1000.0
        response = self._session.send(prepared, timeout=timeout)
        for response_interceptor in self._response_interceptors:
            response = response_interceptor(response)
        return response

    def _send_with_retry(
        self,
        method: HttpMethod,
        path: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        options = options or HttpRequestOptions()
        self.breaker.before_request()

        url = f"{self.config.api_url}{path}"
        attempts = 1 if options.skip_retry else self.config.retry_attempts + 1

        for attempt in range(attempts):
            started = time.time()
            request_id = self._new_request_id()
            audit_headers = dict(self._session.headers)
            audit_headers["X-Request-ID"] = request_id
            response: Optional[requests.Response] = None

            try:
                response = self._send_once(method, url, data, options, request_id)
                response.raise_for_status()
            except Exception as e:
                retryable = self._is_retryable(e)
                # 4xx answers say nothing about backend health
                if retryable:
                    self.breaker.record_failure()
                self._audit(
                    audit_headers, method, url, data, request_id, started,
                    attempt, response=response, error=e,
                )

                if retryable and attempt < attempts - 1:
                    delay = self._backoff(attempt)
                    logger.warning(
                        f"{method.value} {path} failed (attempt {attempt + 1}/{attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    time.sleep(delay)
                    continue

                raise self._to_billing_error(e, response) from e

            self.breaker.record_success()
            self._audit(
                audit_headers, method, url, data, request_id, started,
                attempt, response=response, raw=options.raw,
            )
            return HttpResponse(
                data=response.content if options.raw else _response_body(response),
                status=response.status_code,
                headers=dict(response.headers),
                duration=int((time.time() - started) * 1000),
                request_id=request_id,
            )

        raise BillingError("Request was not attempted")

    def get(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """
        Perform GET request

        Args:
            url: Request path relative to the API URL
            options: Optional request options

        Returns:
            HTTP response wrapper with the decoded JSON body
        """
        return self._send_with_retry(HttpMethod.GET, url, None, options)

    def post(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        """Perform POST request; ``data`` is sent as JSON when given"""
        return self._send_with_retry(HttpMethod.POST, url, data, options)

    def put(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        return self._send_with_retry(HttpMethod.PUT, url, data, options)

    def delete(
        self,
        url: str,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        return self._send_with_retry(HttpMethod.DELETE, url, None, options)

    def patch(
        self,
        url: str,
        data: Optional[Any] = None,
        options: Optional[HttpRequestOptions] = None,
    ) -> HttpResponse[Any]:
        return self._send_with_retry(HttpMethod.PATCH, url, data, options)

    @property
    def circuit_state(self) -> CircuitState:
        """Get current circuit breaker state"""
        return self.breaker.state

    def reset_circuit_breaker(self) -> None:
        """Reset circuit breaker to closed state"""
        self.breaker.reset()
        logger.info("Circuit breaker manually reset to CLOSED state")

    @property
    def base_url(self) -> str:
        return self.config.api_url

    def close(self) -> None:
        """Close the HTTP session"""
        self._session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
