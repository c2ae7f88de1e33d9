"""
Configuration module
"""

from vendor_billing.config.billing_config import (
    BillingConfig,
    PartialBillingConfig,
    DEFAULT_API_URL,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from vendor_billing.config.config_loader import ConfigLoader
from vendor_billing.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "BillingConfig",
    "PartialBillingConfig",
    "DEFAULT_API_URL",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
