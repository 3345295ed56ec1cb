from typing import List, Any, Dict, Optional
from math import ceil


def page_from_offset(offset: int, limit: int) -> int:
    """1-based page number that contains the row at ``offset``"""
    if limit <= 0:
        return 1
    return offset // limit + 1


def paginate(items: List[Any], page: int, limit: int, total: Optional[int] = None) -> Dict[str, Any]:
    """
    Create pagination response
    """
    if total is None:
        total = len(items)

    total_pages = ceil(total / limit) if limit > 0 else 0

    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalItems": total,
        "itemsPerPage": limit,
        "hasNext": page < total_pages,
        "hasPrev": page > 1
    }
