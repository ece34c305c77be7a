# campsite/utils/pagination.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Tuple, Type, TypedDict

from sqlalchemy.orm import Query
from sqlalchemy.sql import and_, or_
from werkzeug.exceptions import BadRequest

MAX_PAGE_SIZE = 100


class CursorMeta(TypedDict):
    has_more: bool
    next_cursor: Optional[str]


def encode_cursor(created_at: datetime, row_id: Any) -> str:
    """
    Cursor format: ISO8601|<id>, the sort key of the last row on a page.
    """
    if not isinstance(created_at, datetime) or row_id is None:
        raise ValueError("created_at and row_id are required to encode cursor")

    return f"{created_at.isoformat()}|{row_id}"


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    if not cursor or "|" not in cursor:
        raise BadRequest("Invalid cursor format")

    ts_str, row_id = cursor.split("|", 1)
    try:
        return datetime.fromisoformat(ts_str), row_id
    except ValueError as exc:
        raise BadRequest("Invalid cursor format") from exc


def parse_limit(raw: Optional[str], default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        limit = int(raw)
    except ValueError as exc:
        raise BadRequest("Limit must be an integer") from exc
    if limit <= 0:
        raise BadRequest("Limit must be greater than zero")
    return min(limit, MAX_PAGE_SIZE)


def paginate_cursor(
    query: Query,
    *,
    model: Type[Any],
    cursor: Optional[str],
    limit: int,
) -> Tuple[List[Any], CursorMeta]:
    """
    Newest-first page of ``query``.

    Ordering contract: ORDER BY created_at DESC, id DESC. One extra row is
    fetched to tell whether another page follows.
    """
    if cursor:
        cursor_ts, cursor_id = decode_cursor(cursor)
        query = query.filter(
            or_(
                model.created_at < cursor_ts,
                and_(model.created_at == cursor_ts, model.id < cursor_id),
            )
        )

    rows = query.order_by(model.created_at.desc(), model.id.desc()).limit(limit + 1).all()

    has_more = len(rows) > limit
    items = rows[:limit]
    next_cursor = encode_cursor(items[-1].created_at, items[-1].id) if has_more else None

    return items, {"has_more": has_more, "next_cursor": next_cursor}
