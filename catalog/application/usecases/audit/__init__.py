"""Caso de uso consumidor de auditoría."""

from .record_audit_work_item import RecordAuditResult, RecordAuditWorkItemUseCase

__all__ = ["RecordAuditResult", "RecordAuditWorkItemUseCase"]
