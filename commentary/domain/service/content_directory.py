"""Content item collaborator port."""

from commentary.domain.value import ContentItemId


class ContentDirectory:
    """Existence check for content items owned by the content service.

    Implementations live in the adapter layer.
    """

    async def exists(self, content_item_id: ContentItemId) -> bool:
        """Check whether a content item exists and accepts comments.

        Args:
            content_item_id: Content item ID

        Returns:
            True if the item exists and has not been removed
        """
        raise NotImplementedError
