"""Google Search Console adapter (searchAnalytics.query)."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable
from urllib.parse import quote

import httpx

from adapters.base import AdapterConfigError, VendorAdapter, calculate_change, to_float

logger = logging.getLogger(__name__)

API_BASE = "https://searchconsole.googleapis.com/webmasters/v3"

PERIOD_DAYS = 30


@dataclass
class SearchTotals:
    clicks: float = 0
    impressions: float = 0
    ctr: float = 0.0  # percent
    position: float = 0.0


@dataclass
class SearchChanges:
    clicks: float
    impressions: float
    ctr: float
    position: float


@dataclass
class SearchSnapshot:
    current: SearchTotals
    previous: SearchTotals
    changes: SearchChanges
    period: str = "30 days"


@dataclass
class DailySearch:
    date: str
    clicks: float
    impressions: float
    ctr: float
    position: float


@dataclass
class QueryRow:
    query: str
    clicks: float
    impressions: float
    ctr: float
    position: float


@dataclass
class SearchPageRow:
    page: str
    clicks: float
    impressions: float
    ctr: float
    position: float


@dataclass(frozen=True)
class DateWindow:
    start: date
    end: date

    def as_body(self) -> dict:
        return {"startDate": self.start.isoformat(), "endDate": self.end.isoformat()}


def reporting_windows(today: date) -> tuple[DateWindow, DateWindow]:
    """(current, previous) windows: the last 30 days and the 30 days before them."""
    start = today - timedelta(days=PERIOD_DAYS)
    prev_end = start - timedelta(days=1)
    prev_start = prev_end - timedelta(days=PERIOD_DAYS)
    return DateWindow(start, today), DateWindow(prev_start, prev_end)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _totals(row: dict) -> SearchTotals:
    return SearchTotals(
        clicks=row.get("clicks") or 0,
        impressions=row.get("impressions") or 0,
        ctr=to_float(row.get("ctr")) * 100,
        position=to_float(row.get("position")),
    )


def _key(row: dict) -> str:
    keys = row.get("keys") or []
    return keys[0] if keys else ""


class SearchConsoleAdapter(VendorAdapter):
    """Search performance for one verified Search Console property."""

    def __init__(
        self,
        site_url: str,
        token_source,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
        today: Callable[[], date] = _utc_today,
    ):
        self.site_url = site_url
        self.token_source = token_source
        self.timeout = timeout
        self.transport = transport
        self.today = today

    @property
    def provider_name(self) -> str:
        return "search_console"

    async def health_check(self) -> bool:
        return bool(self.site_url) and self.token_source.configured

    async def _query(self, body: dict) -> list[dict]:
        if not self.site_url:
            raise AdapterConfigError("SEARCH_CONSOLE_SITE_URL is not configured")
        token = await self.token_source.token()
        site = quote(self.site_url, safe="")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{API_BASE}/sites/{site}/searchAnalytics/query",
                    headers={"Authorization": f"Bearer {token}"},
                    json=body,
                )
                response.raise_for_status()
                return response.json().get("rows") or []
        except httpx.HTTPStatusError as e:
            logger.error(
                "Search Console API error %d: %s",
                e.response.status_code,
                e.response.text,
            )
            raise

    async def search_performance(self) -> SearchSnapshot:
        current_window, previous_window = reporting_windows(self.today())

        current_rows = await self._query({**current_window.as_body(), "dimensions": []})
        previous_rows = await self._query({**previous_window.as_body(), "dimensions": []})

        current = _totals(current_rows[0] if current_rows else {})
        previous = _totals(previous_rows[0] if previous_rows else {})

        return SearchSnapshot(
            current=current,
            previous=previous,
            changes=SearchChanges(
                clicks=calculate_change(current.clicks, previous.clicks),
                impressions=calculate_change(current.impressions, previous.impressions),
                ctr=calculate_change(current.ctr, previous.ctr),
                # Lower position is better, so the comparison runs backwards
                position=calculate_change(previous.position, current.position),
            ),
        )

    async def daily_performance(self) -> list[DailySearch]:
        window, _ = reporting_windows(self.today())
        rows = await self._query({**window.as_body(), "dimensions": ["date"]})
        return [DailySearch(date=_key(row), **vars(_totals(row))) for row in rows]

    async def top_queries(self, limit: int = 10) -> list[QueryRow]:
        window, _ = reporting_windows(self.today())
        rows = await self._query({**window.as_body(), "dimensions": ["query"], "rowLimit": limit})
        return [QueryRow(query=_key(row), **vars(_totals(row))) for row in rows]

    async def top_pages(self, limit: int = 10) -> list[SearchPageRow]:
        window, _ = reporting_windows(self.today())
        rows = await self._query({**window.as_body(), "dimensions": ["page"], "rowLimit": limit})
        return [SearchPageRow(page=_key(row), **vars(_totals(row))) for row in rows]
