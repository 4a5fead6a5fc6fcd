"""Content service client.

Content items (articles, posts, videos) are owned by a separate service;
comments only need to know whether an item exists before attaching to it.
"""

import httpx
import logfire

from commentary.adapter.error import ContentServiceError
from commentary.domain.service.content_directory import ContentDirectory
from commentary.domain.value import ContentItemId


class HttpContentDirectory(ContentDirectory):
    """Content directory backed by the content service HTTP API.

    GET {base_url}/content/{id} answers 200 for live items and 404 or 410
    for unknown or removed ones. Anything else is treated as an outage.
    """

    def __init__(self, base_url: str, timeout: float) -> None:
        """Initialize content service client.

        Args:
            base_url: Content service base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def exists(self, content_item_id: ContentItemId) -> bool:
        """Check whether a content item exists.

        Raises:
            ContentServiceError: If the content service is unreachable or
                answers with an unexpected status
        """
        url = f"{self.base_url}/content/{content_item_id}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logfire.error(
                "Content service HTTP error",
                content_item_id=str(content_item_id),
                error=str(e),
            )
            raise ContentServiceError(f"HTTP error checking content item: {e}")

        if response.status_code == 200:
            return True
        if response.status_code in (404, 410):
            logfire.info(
                "Content item not found",
                content_item_id=str(content_item_id),
                status_code=response.status_code,
            )
            return False

        logfire.error(
            "Content service lookup failed",
            content_item_id=str(content_item_id),
            status_code=response.status_code,
            error=response.text,
        )
        raise ContentServiceError(
            f"Content lookup failed: {response.status_code}"
        )


class MockContentDirectory(ContentDirectory):
    """Mock content directory for testing.

    Every content item exists unless it has been removed explicitly.
    """

    def __init__(self) -> None:
        self._removed: set[ContentItemId] = set()

    def remove(self, content_item_id: ContentItemId) -> None:
        """Mark a content item as removed."""
        self._removed.add(content_item_id)

    async def exists(self, content_item_id: ContentItemId) -> bool:
        """Return False only for removed content items."""
        return content_item_id not in self._removed
