"""FastAPI routes for the Siteflow API gateway."""

import logging
import traceback
from datetime import datetime, timezone
from typing import Awaitable, Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from adapters.ai.base import FALLBACK_ASSESSMENT
from adapters.base import camelize
from adapters.factory import (
    check_all_adapters,
    get_analytics_adapter,
    get_fit_scorer,
    get_pagespeed_adapter,
    get_search_console_adapter,
)
from adapters.pagespeed import STRATEGIES
from navigation import breadcrumbs, command_items, group_commands, search_commands, visible_nav_items
from notifications import NotificationAction, NotificationCenter, Severity, registry
from roles import normalize_role, overview_dashboard_for, role_display_name
from session import read_client_session

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api")

ANALYTICS_ERROR = "Failed to fetch analytics data"
SEARCH_CONSOLE_ERROR = "Failed to fetch Search Console data"
PAGESPEED_ERROR = "Failed to fetch PageSpeed data"


# ── Pydantic models ─────────────────────────────────────

class DashboardShellRequest(BaseModel):
    storage: dict[str, Optional[str]] = {}
    current_page: str = "dashboard"


class NotificationCreate(BaseModel):
    title: str
    message: str
    severity: Severity = Severity.INFO
    action_label: Optional[str] = None
    action_page: Optional[str] = None


# ── Helpers ──────────────────────────────────────────────

async def _proxy(call: Awaitable, error_message: str):
    """Await one adapter call and hand back camelCase JSON; any failure is a generic 500."""
    try:
        result = await call
    except Exception:
        logger.error("%s: %s", error_message, traceback.format_exc())
        raise HTTPException(500, error_message)
    return camelize(result)


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(401, "Missing session token")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(401, "Missing session token")
    return token.strip()


# ── Health ───────────────────────────────────────────────

@router.get("/health")
async def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/health/vendors")
async def vendor_health():
    """Which vendor adapters have the configuration they need."""
    return await check_all_adapters()


# ── AI fit scoring ───────────────────────────────────────

@router.post("/assess-system-needs")
async def assess_system_needs(request: Request):
    """Score how well a prospect's problem fits Siteflow.

    Any failure after validation answers 500 with a neutral canned assessment
    and never the underlying error.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    user_problem = payload.get("userProblem") if isinstance(payload, dict) else None
    if not user_problem or not isinstance(user_problem, str):
        raise HTTPException(400, 'Invalid request. "userProblem" is required.')

    try:
        assessment = await get_fit_scorer().assess(user_problem)
    except Exception:
        logger.error("Fit assessment failed: %s", traceback.format_exc())
        return JSONResponse(status_code=500, content=FALLBACK_ASSESSMENT.to_dict())

    return assessment.to_dict()


# ── Google Analytics ─────────────────────────────────────

@router.get("/analytics/overview")
async def analytics_overview():
    return await _proxy(get_analytics_adapter().traffic_overview(), ANALYTICS_ERROR)


@router.get("/analytics/daily")
async def analytics_daily():
    return await _proxy(get_analytics_adapter().daily_traffic(), ANALYTICS_ERROR)


@router.get("/analytics/top-pages")
async def analytics_top_pages(limit: int = Query(10, ge=1, le=100)):
    return await _proxy(get_analytics_adapter().top_pages(limit), ANALYTICS_ERROR)


# ── Search Console ───────────────────────────────────────

@router.get("/search-console/performance")
async def search_performance():
    return await _proxy(get_search_console_adapter().search_performance(), SEARCH_CONSOLE_ERROR)


@router.get("/search-console/daily")
async def search_daily():
    return await _proxy(get_search_console_adapter().daily_performance(), SEARCH_CONSOLE_ERROR)


@router.get("/search-console/queries")
async def search_queries(limit: int = Query(10, ge=1, le=100)):
    return await _proxy(get_search_console_adapter().top_queries(limit), SEARCH_CONSOLE_ERROR)


@router.get("/search-console/pages")
async def search_pages(limit: int = Query(10, ge=1, le=100)):
    return await _proxy(get_search_console_adapter().top_pages(limit), SEARCH_CONSOLE_ERROR)


# ── PageSpeed Insights ───────────────────────────────────

@router.get("/pagespeed")
async def pagespeed(url: Optional[str] = None, strategy: str = "mobile"):
    if not url:
        raise HTTPException(400, '"url" is required')
    if strategy not in STRATEGIES:
        raise HTTPException(400, f'"strategy" must be one of: {", ".join(STRATEGIES)}')
    return await _proxy(get_pagespeed_adapter().insights(url, strategy), PAGESPEED_ERROR)


@router.get("/pagespeed/full")
async def pagespeed_full(url: Optional[str] = None):
    if not url:
        raise HTTPException(400, '"url" is required')
    return await _proxy(get_pagespeed_adapter().full_report(url), PAGESPEED_ERROR)


# ── Dashboard shell ──────────────────────────────────────

@router.get("/navigation")
async def navigation(role: Optional[str] = None):
    """Navigation entries visible to a role. Unknown roles get the customer menu."""
    resolved = normalize_role(role)
    return {
        "role": resolved.value,
        "items": [item.to_dict() for item in visible_nav_items(resolved)],
    }


@router.get("/commands")
async def commands(role: Optional[str] = None, q: Optional[str] = None):
    items = search_commands(command_items(normalize_role(role)), q)
    return {"items": [item.to_dict() for item in items]}


@router.post("/dashboard/shell")
async def dashboard_shell(body: DashboardShellRequest):
    """Everything the shell needs for one render, from the browser's storage snapshot."""
    session = read_client_session(body.storage)
    role = session.role

    return {
        "authenticated": session.authenticated,
        "user": session.user.to_dict() if session.user else None,
        "role": role.value,
        "role_display_name": role_display_name(role),
        "sidebar_collapsed": session.sidebar_collapsed,
        "nav_items": [item.to_dict() for item in visible_nav_items(role)],
        "command_groups": [
            {"group": group, "items": [item.to_dict() for item in items]}
            for group, items in group_commands(command_items(role)).items()
        ],
        "breadcrumbs": breadcrumbs(role, body.current_page),
        "overview_dashboard": overview_dashboard_for(role),
    }


@router.post("/dashboard/logout")
async def dashboard_logout(authorization: Optional[str] = Header(None)):
    token = _bearer_token(authorization)
    return {"status": "logged_out", "discarded": registry.discard(token)}


# ── Notifications ────────────────────────────────────────

def _existing_center(authorization: Optional[str]) -> NotificationCenter:
    """The token's center, or an empty throwaway one. Never opens a new session."""
    return registry.get(_bearer_token(authorization)) or NotificationCenter()


@router.get("/notifications")
async def list_notifications(authorization: Optional[str] = Header(None)):
    return _existing_center(authorization).to_dict()


@router.post("/notifications", status_code=201)
async def add_notification(body: NotificationCreate, authorization: Optional[str] = Header(None)):
    center = registry.for_session(_bearer_token(authorization))
    action = None
    if body.action_label and body.action_page:
        action = NotificationAction(label=body.action_label, page=body.action_page)
    notification = center.add(body.title, body.message, severity=body.severity, action=action)
    return notification.to_dict()


@router.post("/notifications/read-all")
async def read_all_notifications(authorization: Optional[str] = Header(None)):
    center = _existing_center(authorization)
    return {"updated": center.mark_all_as_read(), "unread_count": center.unread_count}


@router.post("/notifications/{notification_id}/read")
async def read_notification(notification_id: str, authorization: Optional[str] = Header(None)):
    center = _existing_center(authorization)
    if not center.mark_as_read(notification_id):
        raise HTTPException(404, f"Notification {notification_id} not found")
    return {"id": notification_id, "read": True, "unread_count": center.unread_count}


@router.delete("/notifications/{notification_id}")
async def remove_notification(notification_id: str, authorization: Optional[str] = Header(None)):
    center = _existing_center(authorization)
    if not center.remove(notification_id):
        raise HTTPException(404, f"Notification {notification_id} not found")
    return {"id": notification_id, "removed": True}


@router.delete("/notifications")
async def clear_notifications(authorization: Optional[str] = Header(None)):
    center = _existing_center(authorization)
    center.clear()
    return {"cleared": True}
