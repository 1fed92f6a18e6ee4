"""Audit service: logs committed changes of history tables."""
from .models import CHANGE_TYPES, DELETE, INSERT, UPDATE, AuditLog
from .service import AuditService, audit_service

__all__ = [
    "AuditLog",
    "AuditService",
    "audit_service",
    "INSERT",
    "UPDATE",
    "DELETE",
    "CHANGE_TYPES",
]
