# mailer/loops/pagination.py
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional

PageFetcher = Callable[..., Awaitable[Dict[str, Any]]]

async def paginate(fetch_page: PageFetcher, per_page: int = 20) -> AsyncIterator[Any]:
    """Yield every item of a cursor paged listing.

    ``fetch_page(per_page=..., cursor=...)`` must return
    ``{"data": [...], "pagination": {"nextCursor": ..., "nextPage": ...}}``.
    Pages are requested until ``nextCursor`` is null. Each call starts over
    from the first page.
    """
    cursor: Optional[str] = None
    while True:
        page = await fetch_page(per_page=per_page, cursor=cursor)
        for item in page.get("data") or []:
            yield item
        cursor = (page.get("pagination") or {}).get("nextCursor")
        if cursor is None:
            break

async def drain(fetch_page: PageFetcher, per_page: int = 20) -> list:
    """Collect a whole cursor paged listing into a list"""
    return [item async for item in paginate(fetch_page, per_page=per_page)]
