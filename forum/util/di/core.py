"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from forum.config import (
    AuthSettings,
    CacheSettings,
    HubSettings,
    MessagingSettings,
    PipelineSettings,
    Settings,
)
from forum.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    scope = Scope.APP

    @provide
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide
    def provide_cache_settings(self, settings: Settings) -> CacheSettings:
        return settings.cache

    @provide
    def provide_messaging_settings(self, settings: Settings) -> MessagingSettings:
        return settings.messaging

    @provide
    def provide_pipeline_settings(self, settings: Settings) -> PipelineSettings:
        return settings.pipeline

    @provide
    def provide_hub_settings(self, settings: Settings) -> HubSettings:
        return settings.hub
