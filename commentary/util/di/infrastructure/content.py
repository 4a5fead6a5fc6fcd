"""Content service infrastructure providers."""

from dishka import Scope, provide

from commentary.adapter.content import HttpContentDirectory
from commentary.config import ContentSettings
from commentary.domain.service import ContentDirectory
from commentary.util.di.base import ProviderBase
from commentary.util.error import ConfigurationError


class ContentProvider(ProviderBase):
    """Content service component base."""

    __mock_component__ = "content"


class ProdContentProvider(ContentProvider):
    """Production content provider talking to the content service."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_content_directory(self, content_settings: ContentSettings) -> ContentDirectory:
        """Provide content directory.

        Raises:
            ConfigurationError: If the content service URL is not configured
        """
        if not content_settings.base_url:
            raise ConfigurationError("Content service base URL must be configured")

        return HttpContentDirectory(
            base_url=content_settings.base_url,
            timeout=content_settings.timeout_seconds,
        )
