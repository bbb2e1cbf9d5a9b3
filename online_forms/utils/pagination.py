# online_forms/utils/pagination.py
import math

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query


def paginate(query: Query, page: int, limit: int):
    """Return (rows, total) for a 1-based page."""
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return rows, total


def pagination_meta(page: int, limit: int, total: int, with_links: bool = False) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    meta = {
        "current_page": page,
        "total_pages": total_pages,
        "total_items": total,
        "items_per_page": limit,
    }
    if with_links:
        meta["has_next_page"] = page < total_pages
        meta["has_prev_page"] = page > 1
    return meta


def order_clause(model, sort_by: str, sort_order: str, allowed: set, default: str):
    column_name = sort_by if sort_by in allowed else default
    column = getattr(model, column_name)
    return asc(column) if (sort_order or "").upper() == "ASC" else desc(column)
