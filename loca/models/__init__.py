from .base import Base, BigIntId, TimestampMixin, AuditMixin
from . import domain

__all__ = [
    "Base",
    "BigIntId",
    "TimestampMixin",
    "AuditMixin",
    "domain",
]
