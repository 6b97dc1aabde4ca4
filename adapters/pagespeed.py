"""PageSpeed Insights adapter.

The API works without authentication; an API key only raises the quota.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from adapters.base import AdapterError, VendorAdapter

logger = logging.getLogger(__name__)

PAGESPEED_API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

CATEGORIES = ["performance", "accessibility", "best-practices", "seo"]
STRATEGIES = ("mobile", "desktop")


class PageSpeedError(AdapterError):
    """PageSpeed Insights answered with an error."""


@dataclass
class LighthouseScores:
    performance: int
    accessibility: int
    best_practices: int
    seo: int


@dataclass
class LabMetrics:
    first_contentful_paint: str
    largest_contentful_paint: str
    total_blocking_time: str
    cumulative_layout_shift: str
    speed_index: str
    time_to_interactive: str


@dataclass
class WebVital:
    value: float
    display_value: str
    score: float


@dataclass
class CoreWebVitals:
    lcp: WebVital
    fid: WebVital
    cls: WebVital


@dataclass
class PageSpeedResult:
    url: str
    strategy: str
    scores: LighthouseScores
    metrics: LabMetrics
    core_web_vitals: CoreWebVitals
    fetch_time: str


@dataclass
class PageSpeedReport:
    url: str
    mobile: PageSpeedResult
    desktop: PageSpeedResult
    fetch_time: str


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _percent(score) -> int:
    """Lighthouse 0..1 score as a 0..100 integer, halves rounded up."""
    return int(math.floor((score or 0) * 100 + 0.5))


def _display(audits: dict, name: str) -> str:
    return (audits.get(name) or {}).get("displayValue") or "N/A"


def _vital(audits: dict, name: str) -> WebVital:
    audit = audits.get(name) or {}
    return WebVital(
        value=audit.get("numericValue") or 0,
        display_value=audit.get("displayValue") or "N/A",
        score=audit.get("score") or 0,
    )


def parse_pagespeed(data: dict, strategy: str) -> PageSpeedResult:
    """Flatten a runPagespeed payload into scores, lab metrics and core web vitals."""
    lighthouse = data.get("lighthouseResult") or {}
    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}

    def score(name: str) -> int:
        return _percent((categories.get(name) or {}).get("score"))

    return PageSpeedResult(
        url=data.get("id") or "",
        strategy=strategy,
        scores=LighthouseScores(
            performance=score("performance"),
            accessibility=score("accessibility"),
            best_practices=score("best-practices"),
            seo=score("seo"),
        ),
        metrics=LabMetrics(
            first_contentful_paint=_display(audits, "first-contentful-paint"),
            largest_contentful_paint=_display(audits, "largest-contentful-paint"),
            total_blocking_time=_display(audits, "total-blocking-time"),
            cumulative_layout_shift=_display(audits, "cumulative-layout-shift"),
            speed_index=_display(audits, "speed-index"),
            time_to_interactive=_display(audits, "interactive"),
        ),
        core_web_vitals=CoreWebVitals(
            lcp=_vital(audits, "largest-contentful-paint"),
            fid=_vital(audits, "max-potential-fid"),
            cls=_vital(audits, "cumulative-layout-shift"),
        ),
        fetch_time=_now_iso(),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        message = (response.json().get("error") or {}).get("message")
    except ValueError:
        message = None
    return message or "Failed to fetch PageSpeed data"


class PageSpeedAdapter(VendorAdapter):
    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @property
    def provider_name(self) -> str:
        return "pagespeed"

    async def health_check(self) -> bool:
        # Keyless access is allowed
        return True

    def _params(self, url: str, strategy: str) -> list[tuple[str, str]]:
        params = [("url", url), ("strategy", strategy)]
        params.extend(("category", cat) for cat in CATEGORIES)
        if self.api_key:
            params.append(("key", self.api_key))
        return params

    async def insights(self, url: str, strategy: str = "mobile") -> PageSpeedResult:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(PAGESPEED_API_URL, params=self._params(url, strategy))

        if response.is_error:
            message = _error_message(response)
            logger.error("PageSpeed API error %d for %s (%s): %s", response.status_code, url, strategy, message)
            raise PageSpeedError(message)

        return parse_pagespeed(response.json(), strategy)

    async def full_report(self, url: str) -> PageSpeedReport:
        """Mobile and desktop in parallel. Fails as a whole if either fails.

        The first failure cancels the other strategy's request.
        """
        tasks = [asyncio.ensure_future(self.insights(url, strategy)) for strategy in STRATEGIES]
        try:
            mobile, desktop = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return PageSpeedReport(url=url, mobile=mobile, desktop=desktop, fetch_time=_now_iso())
