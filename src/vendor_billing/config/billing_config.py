"""
Vendor Billing Configuration Types and Schema
Type-safe configuration objects for the billing SDK
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


DEFAULT_API_URL = "http://localhost:8080"


class ConfigDefaults:
    """Default configuration values"""
    API_URL = DEFAULT_API_URL
    TIMEOUT = 30000
    RETRY_ATTEMPTS = 3
    RETRY_DELAY = 1000
    ENABLE_AUDIT_LOG = False
    DEFAULT_CURRENCY = "USD"
    INVOICE_PREFIX = "INV"
    QUOTATION_PREFIX = "QUO"
    RECEIPT_PREFIX = "REC"
    TAX_INCLUSIVE_PRICING = False


# Environment variable mapping
ENV_VAR_MAPPING = {
    "BILLING_API_URL": "api_url",
    "BILLING_ACCESS_TOKEN": "access_token",
    "BILLING_TIMEOUT": "timeout",
    "BILLING_RETRY_ATTEMPTS": "retry_attempts",
    "BILLING_RETRY_DELAY": "retry_delay",
    "BILLING_ENABLE_AUDIT_LOG": "enable_audit_log",
    "BILLING_AUDIT_LOG_PATH": "audit_log_path",
    "BILLING_DEFAULT_CURRENCY": "default_currency",
    "BILLING_INVOICE_PREFIX": "invoice_prefix",
    "BILLING_QUOTATION_PREFIX": "quotation_prefix",
    "BILLING_RECEIPT_PREFIX": "receipt_prefix",
    "BILLING_TAX_INCLUSIVE_PRICING": "tax_inclusive_pricing",
}


class BillingConfig(BaseModel):
    """
    Main billing configuration class
    Defines all configuration options for the billing SDK
    """

    # API connection
    api_url: str = Field(
        default=ConfigDefaults.API_URL,
        description="Base URL of the billing REST API"
    )
    access_token: Optional[str] = Field(
        default=None,
        description="Bearer token forwarded on vendor endpoints"
    )
    timeout: int = Field(
        default=ConfigDefaults.TIMEOUT,
        description="Request timeout in milliseconds",
        ge=1000,
        le=300000
    )
    retry_attempts: int = Field(
        default=ConfigDefaults.RETRY_ATTEMPTS,
        description="Number of retry attempts",
        ge=0,
        le=10
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Base delay between retries in milliseconds",
        ge=1,
        le=60000
    )

    # Optional - Audit logging
    enable_audit_log: bool = Field(
        default=ConfigDefaults.ENABLE_AUDIT_LOG,
        description="Enable audit logging of API requests"
    )
    audit_log_path: Optional[str] = Field(
        default=None,
        description="File path for JSON-lines audit logs"
    )

    # Billing defaults
    default_currency: str = Field(
        default=ConfigDefaults.DEFAULT_CURRENCY,
        description="Currency code (ISO 4217) for new documents"
    )
    invoice_prefix: str = Field(
        default=ConfigDefaults.INVOICE_PREFIX,
        description="Invoice number prefix",
        min_length=1
    )
    quotation_prefix: str = Field(
        default=ConfigDefaults.QUOTATION_PREFIX,
        description="Quotation number prefix",
        min_length=1
    )
    receipt_prefix: str = Field(
        default=ConfigDefaults.RECEIPT_PREFIX,
        description="Receipt number prefix",
        min_length=1
    )
    tax_inclusive_pricing: bool = Field(
        default=ConfigDefaults.TAX_INCLUSIVE_PRICING,
        description="Prices already include all taxes"
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate api_url is a valid URL"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_url must be a valid HTTP/HTTPS URL")
        return v.rstrip("/")

    @field_validator("default_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Validate currency is a three-letter ISO 4217 code"""
        code = v.upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("default_currency must be a three-letter ISO 4217 code")
        return code


class PartialBillingConfig(BaseModel):
    """
    Partial configuration for merging from multiple sources
    All fields are optional to allow partial configuration
    """

    api_url: Optional[str] = None
    access_token: Optional[str] = None
    timeout: Optional[int] = None
    retry_attempts: Optional[int] = None
    retry_delay: Optional[int] = None
    enable_audit_log: Optional[bool] = None
    audit_log_path: Optional[str] = None
    default_currency: Optional[str] = None
    invoice_prefix: Optional[str] = None
    quotation_prefix: Optional[str] = None
    receipt_prefix: Optional[str] = None
    tax_inclusive_pricing: Optional[bool] = None

    model_config = {
        "str_strip_whitespace": True,
    }
