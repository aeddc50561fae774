"""Use case records, held in process memory.

Records are stored in their camelCase wire shape. Nothing survives a restart.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from app.core.logging import get_logger

logger = get_logger(__name__)

_records: dict[str, dict[str, Any]] = {}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_use_case(data: dict[str, Any]) -> dict[str, Any]:
    """
    Store a new use case record.

    Args:
        data: Record fields (camelCase); any id or timestamps given are replaced

    Returns:
        Stored record with id, createdAt and updatedAt
    """
    now = _now()
    record = {**data, "id": str(uuid4()), "createdAt": now, "updatedAt": now}
    _records[record["id"]] = record
    logger.info(f"Created use case {record['id']}", extra={"use_case_id": record["id"]})
    return dict(record)


def get_use_case(use_case_id: str) -> dict[str, Any] | None:
    record = _records.get(use_case_id)
    return dict(record) if record is not None else None


def list_use_cases() -> list[dict[str, Any]]:
    """All records, newest first."""
    return sorted(
        (dict(r) for r in _records.values()),
        key=lambda r: r["createdAt"],
        reverse=True,
    )


def update_use_case(use_case_id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
    """
    Merge updates into an existing record and bump updatedAt.

    Returns:
        Updated record, or None when the id is unknown
    """
    record = _records.get(use_case_id)
    if record is None:
        return None
    protected = {"id", "createdAt"}
    record.update({k: v for k, v in updates.items() if k not in protected})
    record["updatedAt"] = _now()
    logger.info(f"Updated use case {use_case_id}", extra={"use_case_id": use_case_id})
    return dict(record)


def delete_use_case(use_case_id: str) -> bool:
    """Remove a record; False when it did not exist."""
    removed = _records.pop(use_case_id, None) is not None
    if removed:
        logger.info(f"Deleted use case {use_case_id}", extra={"use_case_id": use_case_id})
    return removed


def clear_use_cases() -> None:
    _records.clear()
