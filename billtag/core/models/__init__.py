from .base import CallContextMixin, Model, RecordIdMixin, TenantMixin, UUIDMixin

__all__ = [
    "Model",
    "RecordIdMixin",
    "UUIDMixin",
    "TenantMixin",
    "CallContextMixin",
]
