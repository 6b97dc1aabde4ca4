"""Adapter factory: builds vendor adapters from config and caches them per process."""

import logging

from config import settings
from adapters.ai.base import FitScorer
from adapters.analytics import GoogleAnalyticsAdapter
from adapters.google_auth import ANALYTICS_SCOPE, SEARCH_CONSOLE_SCOPE, ServiceAccountTokenSource
from adapters.pagespeed import PageSpeedAdapter
from adapters.search_console import SearchConsoleAdapter

logger = logging.getLogger(__name__)

# Cache adapter instances
_analytics_adapter: GoogleAnalyticsAdapter | None = None
_search_console_adapter: SearchConsoleAdapter | None = None
_pagespeed_adapter: PageSpeedAdapter | None = None
_fit_scorer: FitScorer | None = None


def get_analytics_adapter(force_new: bool = False) -> GoogleAnalyticsAdapter:
    global _analytics_adapter

    if _analytics_adapter is not None and not force_new:
        return _analytics_adapter

    _analytics_adapter = GoogleAnalyticsAdapter(
        property_id=settings.ga4_property_id,
        token_source=ServiceAccountTokenSource(
            settings.google_client_email, settings.google_private_key, ANALYTICS_SCOPE
        ),
        timeout=settings.http_timeout_seconds,
    )
    return _analytics_adapter


def get_search_console_adapter(force_new: bool = False) -> SearchConsoleAdapter:
    global _search_console_adapter

    if _search_console_adapter is not None and not force_new:
        return _search_console_adapter

    _search_console_adapter = SearchConsoleAdapter(
        site_url=settings.search_console_site_url,
        token_source=ServiceAccountTokenSource(
            settings.google_client_email, settings.google_private_key, SEARCH_CONSOLE_SCOPE
        ),
        timeout=settings.http_timeout_seconds,
    )
    return _search_console_adapter


def get_pagespeed_adapter(force_new: bool = False) -> PageSpeedAdapter:
    global _pagespeed_adapter

    if _pagespeed_adapter is not None and not force_new:
        return _pagespeed_adapter

    _pagespeed_adapter = PageSpeedAdapter(
        api_key=settings.google_api_key or None,
        timeout=settings.http_timeout_seconds,
    )
    return _pagespeed_adapter


def get_fit_scorer(force_new: bool = False) -> FitScorer:
    """Get the fit-scoring provider. Gemini is the only implementation."""
    global _fit_scorer

    if _fit_scorer is not None and not force_new:
        return _fit_scorer

    from adapters.ai.gemini import GeminiFitScorer

    _fit_scorer = GeminiFitScorer(api_key=settings.gemini_api_key, model=settings.gemini_model)
    logger.info("Using Gemini fit scorer: %s", settings.gemini_model)
    return _fit_scorer


async def check_all_adapters() -> dict[str, bool]:
    """Report which vendors have the configuration they need.

    Returns:
        Dictionary mapping provider name to readiness.
    """
    results = {}
    adapters = [
        get_analytics_adapter(),
        get_search_console_adapter(),
        get_pagespeed_adapter(),
        get_fit_scorer(),
    ]
    for adapter in adapters:
        try:
            results[adapter.provider_name] = await adapter.health_check()
        except Exception as e:
            logger.error("%s health check failed: %s", adapter.provider_name, e)
            results[adapter.provider_name] = False
    return results


def reset_adapters():
    """Reset all cached adapter instances.

    Useful for testing or when configuration changes.
    """
    global _analytics_adapter, _search_console_adapter, _pagespeed_adapter, _fit_scorer
    _analytics_adapter = None
    _search_console_adapter = None
    _pagespeed_adapter = None
    _fit_scorer = None
