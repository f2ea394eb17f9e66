"""Audit logging package."""

from fintrack.audit.logger import (
    AuditLogger,
    configure_logging,
    create_correlation_id,
    get_audit_logger,
)

__all__ = [
    "AuditLogger",
    "configure_logging",
    "create_correlation_id",
    "get_audit_logger",
]
