import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from certadmin.schemas.admin_user_schema import HistoryEntry, HistoryPage, Pagination

logger = logging.getLogger(__name__)

COLLECTION = "systemHistory"

def record_history(
    db,
    action: str,
    entity_type: str,
    entity_id: str,
    entity_name: str,
    performed_by: str,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Appends an audit entry to `systemHistory`.
    The change it describes has already been committed, so a failure here is logged and not raised.
    """
    entry = {
        "action": action,
        "entityType": entity_type,
        "entityId": entity_id,
        "entityName": entity_name,
        "performedBy": performed_by,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "details": details or {},
    }
    try:
        db.collection(COLLECTION).add(entry)
        logger.debug(f"History recorded: {action} {entity_type} {entity_id} by {performed_by}")
    except Exception as e:
        logger.error(f"Failed to record history for {action} {entity_type} {entity_id}: {e}", exc_info=True)


def list_history(db, page: int = 1, limit: int = 50, entity_type: Optional[str] = None) -> HistoryPage:
    """Audit entries, newest first, one page at a time. Optionally only those for one entity type."""
    query = db.collection(COLLECTION)
    if entity_type:
        query = query.where(filter=FieldFilter("entityType", "==", entity_type))

    entries: List[HistoryEntry] = []
    for snapshot in query.stream():
        data = snapshot.to_dict() or {}
        entries.append(HistoryEntry(
            id=snapshot.id,
            action=data.get("action", ""),
            entity_type=data.get("entityType", ""),
            entity_id=data.get("entityId", ""),
            entity_name=data.get("entityName"),
            performed_by=data.get("performedBy"),
            timestamp=data.get("timestamp"),
            details=data.get("details") or {},
        ))
    # ISO-8601 UTC timestamps sort chronologically as strings
    entries.sort(key=lambda entry: entry.timestamp or "", reverse=True)

    total = len(entries)
    start = (page - 1) * limit
    return HistoryPage(
        data=entries[start:start + limit],
        pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
    )
