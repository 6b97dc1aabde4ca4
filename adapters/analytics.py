"""Google Analytics 4 adapter (Analytics Data API v1beta runReport)."""

import logging
from dataclasses import dataclass

import httpx

from adapters.base import AdapterConfigError, VendorAdapter, calculate_change, to_float, to_int

logger = logging.getLogger(__name__)

API_BASE = "https://analyticsdata.googleapis.com/v1beta"

OVERVIEW_METRICS = ["activeUsers", "sessions", "screenPageViews", "bounceRate", "averageSessionDuration"]


@dataclass
class TrafficTotals:
    active_users: int = 0
    sessions: int = 0
    page_views: int = 0
    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0


@dataclass
class TrafficChanges:
    active_users: float
    sessions: float
    page_views: float
    bounce_rate: float
    avg_session_duration: float


@dataclass
class TrafficSnapshot:
    current: TrafficTotals
    previous: TrafficTotals
    changes: TrafficChanges
    period: str = "30 days"


@dataclass
class DailyTraffic:
    date: str
    active_users: int
    sessions: int
    page_views: int


@dataclass
class TopPage:
    page_path: str
    page_views: int
    active_users: int
    avg_duration: float


def _metric(row: dict | None, index: int) -> str:
    values = (row or {}).get("metricValues") or []
    if index < len(values):
        return values[index].get("value") or "0"
    return "0"


def _dimension(row: dict | None, index: int) -> str:
    values = (row or {}).get("dimensionValues") or []
    if index < len(values):
        return values[index].get("value") or ""
    return ""


def _rows_by_date_range(rows: list[dict]) -> tuple[dict | None, dict | None]:
    """Split a two-range report into (current, previous) rows.

    The API tags rows with a date_range_N dimension when it sends one;
    otherwise rows arrive in range order.
    """
    tagged = {_dimension(row, 0): row for row in rows if _dimension(row, 0).startswith("date_range_")}
    if tagged:
        return tagged.get("date_range_0"), tagged.get("date_range_1")
    current = rows[0] if len(rows) > 0 else None
    previous = rows[1] if len(rows) > 1 else None
    return current, previous


def _totals(row: dict | None) -> TrafficTotals:
    return TrafficTotals(
        active_users=to_int(_metric(row, 0)),
        sessions=to_int(_metric(row, 1)),
        page_views=to_int(_metric(row, 2)),
        bounce_rate=to_float(_metric(row, 3)),
        avg_session_duration=to_float(_metric(row, 4)),
    )


class GoogleAnalyticsAdapter(VendorAdapter):
    """Traffic reports for a single GA4 property.

    Usage:
        adapter = GoogleAnalyticsAdapter(property_id="123456789", token_source=source)
        snapshot = await adapter.traffic_overview()
    """

    def __init__(
        self,
        property_id: str,
        token_source,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.property_id = property_id
        self.token_source = token_source
        self.timeout = timeout
        self.transport = transport

    @property
    def provider_name(self) -> str:
        return "google_analytics"

    async def health_check(self) -> bool:
        return bool(self.property_id) and self.token_source.configured

    async def _run_report(self, body: dict) -> dict:
        if not self.property_id:
            raise AdapterConfigError("GA4_PROPERTY_ID is not configured")
        token = await self.token_source.token()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{API_BASE}/properties/{self.property_id}:runReport",
                    headers={"Authorization": f"Bearer {token}"},
                    json=body,
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "GA4 API error %d: %s",
                e.response.status_code,
                e.response.text,
            )
            raise

    async def traffic_overview(self) -> TrafficSnapshot:
        """Last 30 days against the 30 days before that."""
        data = await self._run_report({
            "dateRanges": [
                {"startDate": "30daysAgo", "endDate": "today"},
                {"startDate": "60daysAgo", "endDate": "31daysAgo"},
            ],
            "metrics": [{"name": name} for name in OVERVIEW_METRICS],
        })

        current_row, previous_row = _rows_by_date_range(data.get("rows") or [])
        current = _totals(current_row)
        previous = _totals(previous_row)

        return TrafficSnapshot(
            current=current,
            previous=previous,
            changes=TrafficChanges(
                active_users=calculate_change(current.active_users, previous.active_users),
                sessions=calculate_change(current.sessions, previous.sessions),
                page_views=calculate_change(current.page_views, previous.page_views),
                bounce_rate=calculate_change(current.bounce_rate, previous.bounce_rate),
                avg_session_duration=calculate_change(
                    current.avg_session_duration, previous.avg_session_duration
                ),
            ),
        )

    async def daily_traffic(self) -> list[DailyTraffic]:
        data = await self._run_report({
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "dimensions": [{"name": "date"}],
            "metrics": [{"name": "activeUsers"}, {"name": "sessions"}, {"name": "screenPageViews"}],
            "orderBys": [{"dimension": {"dimensionName": "date"}}],
        })
        return [
            DailyTraffic(
                date=_dimension(row, 0),
                active_users=to_int(_metric(row, 0)),
                sessions=to_int(_metric(row, 1)),
                page_views=to_int(_metric(row, 2)),
            )
            for row in data.get("rows") or []
        ]

    async def top_pages(self, limit: int = 10) -> list[TopPage]:
        data = await self._run_report({
            "dateRanges": [{"startDate": "30daysAgo", "endDate": "today"}],
            "dimensions": [{"name": "pagePath"}],
            "metrics": [
                {"name": "screenPageViews"},
                {"name": "activeUsers"},
                {"name": "averageSessionDuration"},
            ],
            "orderBys": [{"metric": {"metricName": "screenPageViews"}, "desc": True}],
            "limit": limit,
        })
        return [
            TopPage(
                page_path=_dimension(row, 0),
                page_views=to_int(_metric(row, 0)),
                active_users=to_int(_metric(row, 1)),
                avg_duration=to_float(_metric(row, 2)),
            )
            for row in data.get("rows") or []
        ]
