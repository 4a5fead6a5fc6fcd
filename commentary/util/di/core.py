"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from commentary.config import (
    DEFAULT_JWT_SECRET,
    AuthSettings,
    ContentSettings,
    Settings,
    ThreadSettings,
)
from commentary.util.di.base import ProviderBase
from commentary.util.error import ConfigurationError


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings.

        Raises:
            ConfigurationError: If production runs with the default secret
        """
        if (
            settings.environment == "production"
            and settings.auth.jwt_secret == DEFAULT_JWT_SECRET
        ):
            raise ConfigurationError("AUTH__JWT_SECRET must be set in production")
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_content_settings(self, settings: Settings) -> ContentSettings:
        """Provide content service settings."""
        return settings.content

    @provide(scope=Scope.APP)
    def provide_thread_settings(self, settings: Settings) -> ThreadSettings:
        """Provide comment thread settings."""
        return settings.thread
