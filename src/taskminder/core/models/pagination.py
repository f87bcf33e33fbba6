"""分页约定与页码计算"""

import math

from .dto import PaginationMeta

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MIN_PAGE = 1
MIN_LIMIT = 1
MAX_LIMIT = 1000


def build_pagination_meta(page: int, limit: int, total: int) -> PaginationMeta:
    """total_pages = ceil(total / limit)；has_next = page < total_pages；has_previous = page > 1"""
    total_pages = math.ceil(total / limit)
    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > MIN_PAGE,
    )
