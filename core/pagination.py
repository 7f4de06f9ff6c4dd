"""
Offset pagination shared by every listing endpoint.

Listings take ``page`` (1-based) and ``limit`` from the query string and
report ``{total, page, pages}`` next to the data.
"""
from __future__ import annotations

import math


def paginate(queryset, page: int, limit: int):
    """Return ``(items, pagination)`` for one page of ``queryset``."""
    total = queryset.count()
    start = (page - 1) * limit
    items = list(queryset[start:start + limit])
    return items, {
        'total': total,
        'page': page,
        'pages': math.ceil(total / limit) if limit else 0,
    }
