from typing import Sequence

from .schemas.common import PageResponse


def build_page(data: Sequence, page: int, page_size: int, count: int) -> PageResponse:
    """Wrap one page of items and the total match count in the page envelope."""
    return PageResponse(page=page, page_size=page_size, count=count, data=list(data))
