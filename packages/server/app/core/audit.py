"""
Audit trail for membership-affecting actions.

Audit writes are best-effort: a failed write is logged and never fails the
action that triggered it.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog

from app.core.store import EntityStore, StoreError
from app.models.audit_log import AuditLog

log = structlog.get_logger()


async def record_audit_event(
    store: EntityStore,
    *,
    user_id: str,
    action: str,
    entity_type: str,
    entity_id: str | uuid.UUID,
    organization_id: Optional[uuid.UUID] = None,
    details: Optional[dict] = None,
) -> Optional[AuditLog]:
    """Append an audit entry. Returns None if the store rejected it."""
    try:
        return await store.create(
            AuditLog,
            user_id=user_id,
            organization_id=organization_id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id),
            details=details or {},
        )
    except StoreError as exc:
        log.warning("audit.write_failed", action=action, entity_id=str(entity_id), error=str(exc))
        return None
