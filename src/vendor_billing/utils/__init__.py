"""Utilities module initialization"""

from vendor_billing.utils.logger import (
    AuditLogWriter,
    SensitiveFilter,
    audit_writer_for,
    configure_logging,
)

__all__ = ["AuditLogWriter", "SensitiveFilter", "audit_writer_for", "configure_logging"]
