"""
Audit logging service.
Append-only audit log of asset and request lifecycle changes.
"""
from datetime import datetime
from typing import Optional, Dict
from sqlalchemy.orm import Session

from ..models.models import AuditLog


def create_audit_log(
    db: Session,
    tenant_id,
    entity_type: str,
    entity_id: str,
    action: str,
    changes_json: Optional[Dict] = None,
    context: Optional[Dict] = None,
) -> AuditLog:
    """
    Create an append-only audit log entry.

    Args:
        db: Database session
        tenant_id: Owning tenant
        entity_type: Type of entity (asset|request)
        entity_id: Entity ID
        action: Action performed (ASSIGN|RETURN|REPAIR|DISPOSE|STATUS_CHANGE)
        changes_json: Before/after diff
        context: Additional context (user_id, return_date, admin_note, etc.)

    Returns:
        Created AuditLog object
    """
    audit_log = AuditLog(
        tenant_id=tenant_id,
        entity_type=entity_type,
        entity_id=str(entity_id),
        action=action,
        changes_json=changes_json,
        context=context,
        timestamp_utc=datetime.utcnow().replace(tzinfo=None),
    )

    db.add(audit_log)
    db.commit()
    db.refresh(audit_log)

    return audit_log


def compute_diff(before: Dict, after: Dict) -> Dict:
    """
    Compute a diff between two dictionaries.

    Args:
        before: Before state
        after: After state

    Returns:
        Dict with before/after values for changed fields
    """
    diff = {}
    all_keys = set(before.keys()) | set(after.keys())

    for key in all_keys:
        before_val = before.get(key)
        after_val = after.get(key)

        if before_val != after_val:
            diff[key] = {
                "before": before_val,
                "after": after_val,
            }

    return diff
