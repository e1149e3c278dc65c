"""Read Helpers - degrade list endpoints to an empty array on storage failure.

Invariants:
    - Only StorageError is absorbed; every other error still propagates
    - A degraded response is HTTP 500 with body [] and is logged with traceback
"""

import logging
from typing import Awaitable

from fastapi import status
from fastapi.responses import JSONResponse

from seat_allocator.core.errors import StorageError

logger = logging.getLogger(__name__)


async def list_or_empty(read: Awaitable[list], resource: str):
    """Await a list read; on StorageError answer 500 with []."""
    try:
        return await read
    except StorageError as e:
        logger.error(
            f"Failed to fetch {resource}: {e.message}",
            exc_info=True, extra={"error_code": e.code},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=[],
        )
