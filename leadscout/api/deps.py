from typing import Callable

from fastapi import Depends, Request

from ..core.config import Settings, settings
from ..core.errors import ApiError
from ..providers.base import SearchProvider
from ..providers.outscraper import OutscraperConfig, OutscraperProvider
from ..storage.base import LeadStore

ProviderFactory = Callable[[], SearchProvider]


def get_settings() -> Settings:
    return settings


def get_store(request: Request) -> LeadStore:
    return request.app.state.store


def get_provider_factory(request: Request, cfg: Settings = Depends(get_settings)) -> ProviderFactory:
    """
    Returns a callable rather than the provider itself so handlers decide
    when the credential check happens relative to their own input checks.
    """
    def build() -> SearchProvider:
        if not cfg.outscraper_api_key:
            raise ApiError(500, "API key is not configured.")
        return OutscraperProvider(
            OutscraperConfig(
                api_key=cfg.outscraper_api_key,
                base_url=cfg.outscraper_base_url,
                timeout_s=cfg.outscraper_timeout_s,
            ),
            client=request.app.state.http_client,
        )

    return build
