"""
Configuration Validator
Validates billing configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from vendor_billing.exceptions import ValidationError


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Provides comprehensive validation for billing configuration
    """

    def __init__(self) -> None:
        self._errors: List[ValidationErrorDetail] = []

    def validate(self, config: Dict[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration dictionary

        Args:
            config: Configuration dictionary to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []

        self._validate_formats(config)
        self._validate_ranges(config)
        self._validate_billing_defaults(config)
        self._validate_audit_log(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy()
        )

    def validate_or_raise(self, config: Dict[str, Any]) -> None:
        """
        Validate and raise if invalid

        Args:
            config: Configuration dictionary to validate

        Raises:
            ValidationError: If configuration is invalid
        """
        result = self.validate(config)
        if not result.valid:
            error_messages = "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
            raise ValidationError(f"Configuration validation failed: {error_messages}")

    def _validate_formats(self, config: Dict[str, Any]) -> None:
        """Validate field formats"""
        api_url = config.get("api_url")
        if api_url is not None:
            if not isinstance(api_url, str) or not api_url.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field="api_url",
                    message="api_url must be a valid HTTP/HTTPS URL",
                    value=api_url
                ))

        access_token = config.get("access_token")
        if access_token is not None:
            if not isinstance(access_token, str) or access_token.strip() == "":
                self._errors.append(ValidationErrorDetail(
                    field="access_token",
                    message="access_token cannot be empty",
                    value="[REDACTED]"
                ))

    def _validate_ranges(self, config: Dict[str, Any]) -> None:
        """Validate numeric ranges"""
        # Timeout validation
        timeout = config.get("timeout")
        if timeout is not None:
            if not isinstance(timeout, (int, float)) or timeout <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout must be a positive number (milliseconds)",
                    value=timeout
                ))
            elif timeout < 1000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should be at least 1000ms for reliable operation",
                    value=timeout
                ))
            elif timeout > 300000:
                self._errors.append(ValidationErrorDetail(
                    field="timeout",
                    message="timeout should not exceed 300000ms (5 minutes)",
                    value=timeout
                ))

        # Retry attempts validation
        retry_attempts = config.get("retry_attempts")
        if retry_attempts is not None:
            if not isinstance(retry_attempts, int) or retry_attempts < 0:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts must be a non-negative integer",
                    value=retry_attempts
                ))
            elif retry_attempts > 10:
                self._errors.append(ValidationErrorDetail(
                    field="retry_attempts",
                    message="retry_attempts should not exceed 10",
                    value=retry_attempts
                ))

        # Retry delay validation
        retry_delay = config.get("retry_delay")
        if retry_delay is not None:
            if not isinstance(retry_delay, (int, float)) or retry_delay <= 0:
                self._errors.append(ValidationErrorDetail(
                    field="retry_delay",
                    message="retry_delay must be a positive number (milliseconds)",
                    value=retry_delay
                ))
            elif retry_delay > 60000:
                self._errors.append(ValidationErrorDetail(
                    field="retry_delay",
                    message="retry_delay should not exceed 60000ms (1 minute)",
                    value=retry_delay
                ))

    def _validate_billing_defaults(self, config: Dict[str, Any]) -> None:
        """Validate currency and document prefixes"""
        currency = config.get("default_currency")
        if currency is not None:
            if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
                self._errors.append(ValidationErrorDetail(
                    field="default_currency",
                    message="default_currency must be a three-letter ISO 4217 code",
                    value=currency
                ))

        for prefix_field in ["invoice_prefix", "quotation_prefix", "receipt_prefix"]:
            prefix = config.get(prefix_field)
            if prefix is None:
                continue
            if not isinstance(prefix, str) or prefix.strip() == "":
                self._errors.append(ValidationErrorDetail(
                    field=prefix_field,
                    message=f"{prefix_field} cannot be empty",
                    value=prefix
                ))
            elif not prefix.replace("-", "").isalnum():
                self._errors.append(ValidationErrorDetail(
                    field=prefix_field,
                    message=f"{prefix_field} may only contain letters, digits and dashes",
                    value=prefix
                ))

    def _validate_audit_log(self, config: Dict[str, Any]) -> None:
        """Validate audit log settings"""
        path_value = config.get("audit_log_path")
        if path_value is not None and path_value != "":
            if not isinstance(path_value, str):
                self._errors.append(ValidationErrorDetail(
                    field="audit_log_path",
                    message="audit_log_path must be a string",
                    value=path_value
                ))
