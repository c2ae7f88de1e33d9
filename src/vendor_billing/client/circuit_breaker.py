"""
Circuit breaker guarding the billing API transport

CLOSED lets requests through and counts consecutive failures. Reaching the
threshold moves to OPEN, which rejects requests until the recovery timeout
has passed. The next request then runs in HALF_OPEN; enough successes close
the circuit again and any failure reopens it.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum

from vendor_billing.exceptions import NetworkError

logger = logging.getLogger(__name__)


class CircuitState(str, Enum):
    """Circuit breaker states"""
    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration"""
    failure_threshold: int = 5
    recovery_timeout: int = 30000  # milliseconds
    success_threshold: int = 3


class CircuitBreaker:
    """Tracks backend health across requests"""

    def __init__(self, config: CircuitBreakerConfig) -> None:
        self.config = config
        self.reset()

    def reset(self) -> None:
        self.state = CircuitState.CLOSED
        self.failures = 0
        self.successes = 0
        self.opened_at = 0.0

    def _elapsed_ms(self) -> float:
        return (time.monotonic() - self.opened_at) * 1000

    def _open(self) -> None:
        self.state = CircuitState.OPEN
        self.opened_at = time.monotonic()

    def before_request(self) -> None:
        """
        Gate a request on the circuit state

        Raises:
            NetworkError: If the circuit is open and still cooling down
        """
        if self.state != CircuitState.OPEN:
            return

        elapsed = self._elapsed_ms()
        if elapsed < self.config.recovery_timeout:
            retry_after = int((self.config.recovery_timeout - elapsed) / 1000)
            raise NetworkError.circuit_breaker_open(retry_after)

        self.state = CircuitState.HALF_OPEN
        self.successes = 0
        logger.info("Circuit breaker HALF_OPEN, probing the billing API")

    def record_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            self.successes += 1
            if self.successes >= self.config.success_threshold:
                self.reset()
                logger.info("Circuit breaker CLOSED after recovery")
        else:
            self.failures = 0

    def record_failure(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            self._open()
            logger.warning("Circuit breaker reopened by a failed trial request")
            return

        self.failures += 1
        if self.state == CircuitState.CLOSED and self.failures >= self.config.failure_threshold:
            self._open()
            logger.warning(f"Circuit breaker OPEN after {self.failures} consecutive failures")
