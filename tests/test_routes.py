import json

import pytest

import routes
from adapters.ai.base import FALLBACK_ANALYSIS, FitAssessment
from adapters.ai.gemini import GeminiFitScorer
from adapters.analytics import TrafficChanges, TrafficSnapshot, TrafficTotals
from adapters.base import AdapterConfigError
from adapters.pagespeed import PageSpeedError
from config import settings
from session import AUTH_TOKEN_KEY, SIDEBAR_COLLAPSED_KEY, USER_KEY


class FakeScorer:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.problems = []

    async def assess(self, user_problem):
        self.problems.append(user_problem)
        if self.error:
            raise self.error
        return self.result


class FakeAnalytics:
    def __init__(self, error=None):
        self.error = error

    async def traffic_overview(self):
        if self.error:
            raise self.error
        totals = TrafficTotals(active_users=10, sessions=12, page_views=40, bounce_rate=0.4, avg_session_duration=30)
        return TrafficSnapshot(
            current=totals,
            previous=totals,
            changes=TrafficChanges(0, 0, 0, 0, 0),
        )


class FailingPageSpeed:
    async def full_report(self, url):
        raise PageSpeedError("Quota exceeded")


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert "timestamp" in resp.json()


# ── assess-system-needs ──────────────────────────────────

@pytest.mark.parametrize(
    "body",
    [{}, {"userProblem": ""}, {"userProblem": 42}, {"userProblem": ["a"]}, {"other": "x"}, [1, 2]],
)
def test_assess_rejects_invalid_input(client, monkeypatch, body):
    scorer = FakeScorer(result=FitAssessment("x", 50))
    monkeypatch.setattr(routes, "get_fit_scorer", lambda: scorer)

    resp = client.post("/api/assess-system-needs", json=body)

    assert resp.status_code == 400
    assert scorer.problems == []


def test_assess_rejects_non_json_body(client):
    resp = client.post(
        "/api/assess-system-needs",
        content=b"userProblem=hello",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert resp.status_code == 400


def test_assess_success(client, monkeypatch):
    scorer = FakeScorer(result=FitAssessment("Passar bra.", 88))
    monkeypatch.setattr(routes, "get_fit_scorer", lambda: scorer)

    resp = client.post("/api/assess-system-needs", json={"userProblem": "Servern kraschar"})

    assert resp.status_code == 200
    assert resp.json() == {"analysis": "Passar bra.", "fitScore": 88}
    assert scorer.problems == ["Servern kraschar"]


@pytest.mark.parametrize("error", [RuntimeError("quota"), ValueError("bad json"), TimeoutError()])
def test_assess_upstream_failure_returns_fallback(client, monkeypatch, error):
    monkeypatch.setattr(routes, "get_fit_scorer", lambda: FakeScorer(error=error))

    resp = client.post("/api/assess-system-needs", json={"userProblem": "Servern kraschar"})

    assert resp.status_code == 500
    assert resp.json() == {"analysis": FALLBACK_ANALYSIS, "fitScore": 0}


def test_assess_without_api_key_returns_fallback(client, monkeypatch):
    monkeypatch.setattr(routes, "get_fit_scorer", lambda: GeminiFitScorer(api_key=""))

    resp = client.post("/api/assess-system-needs", json={"userProblem": "Servern kraschar"})

    assert resp.status_code == 500
    assert resp.json()["fitScore"] == 0


# ── Vendor reports ───────────────────────────────────────

def test_analytics_overview_is_camel_case(client, monkeypatch):
    monkeypatch.setattr(routes, "get_analytics_adapter", lambda: FakeAnalytics())

    resp = client.get("/api/analytics/overview")

    assert resp.status_code == 200
    body = resp.json()
    assert body["current"]["activeUsers"] == 10
    assert body["current"]["pageViews"] == 40
    assert "avgSessionDuration" in body["changes"]
    assert body["period"] == "30 days"


def test_analytics_failure_is_generic_500(client, monkeypatch):
    monkeypatch.setattr(
        routes, "get_analytics_adapter", lambda: FakeAnalytics(error=AdapterConfigError("secret detail"))
    )

    resp = client.get("/api/analytics/overview")

    assert resp.status_code == 500
    assert resp.json() == {"detail": routes.ANALYTICS_ERROR}


def test_unconfigured_analytics_is_generic_500(client, monkeypatch):
    monkeypatch.setattr(settings, "ga4_property_id", "")

    resp = client.get("/api/analytics/daily")

    assert resp.status_code == 500
    assert resp.json()["detail"] == routes.ANALYTICS_ERROR


def test_unconfigured_search_console_is_generic_500(client, monkeypatch):
    monkeypatch.setattr(settings, "search_console_site_url", "")

    resp = client.get("/api/search-console/performance")

    assert resp.status_code == 500
    assert resp.json()["detail"] == routes.SEARCH_CONSOLE_ERROR


def test_limit_is_validated(client):
    assert client.get("/api/analytics/top-pages?limit=0").status_code == 422
    assert client.get("/api/search-console/queries?limit=500").status_code == 422


def test_pagespeed_requires_url(client):
    assert client.get("/api/pagespeed").status_code == 400
    assert client.get("/api/pagespeed/full").status_code == 400


def test_pagespeed_rejects_unknown_strategy(client):
    resp = client.get("/api/pagespeed", params={"url": "https://siteflow.se", "strategy": "tablet"})
    assert resp.status_code == 400


def test_pagespeed_full_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(routes, "get_pagespeed_adapter", lambda: FailingPageSpeed())

    resp = client.get("/api/pagespeed/full", params={"url": "https://siteflow.se"})

    assert resp.status_code == 500
    assert resp.json()["detail"] == routes.PAGESPEED_ERROR


def test_vendor_health_reports_configuration(client, monkeypatch):
    monkeypatch.setattr(settings, "ga4_property_id", "")
    monkeypatch.setattr(settings, "gemini_api_key", "k")

    resp = client.get("/api/health/vendors")

    assert resp.status_code == 200
    body = resp.json()
    assert body["google_analytics"] is False
    assert body["pagespeed"] is True
    assert body["gemini"] is True


# ── Dashboard shell ──────────────────────────────────────

def test_navigation_endpoint(client):
    resp = client.get("/api/navigation", params={"role": "customer"})
    ids = [item["id"] for item in resp.json()["items"]]
    assert "companies" not in ids
    assert ids[0] == "dashboard"

    unknown = client.get("/api/navigation", params={"role": "root"}).json()
    assert unknown["role"] == "customer"
    assert [item["id"] for item in unknown["items"]] == ids


def test_commands_endpoint_filters(client):
    resp = client.get("/api/commands", params={"role": "admin", "q": "avsluta"})
    assert [item["id"] for item in resp.json()["items"]] == ["logout"]


def shell_storage(role):
    return {
        AUTH_TOKEN_KEY: "tok-shell",
        USER_KEY: json.dumps({"id": "9", "name": "Kim", "email": "kim@siteflow.se", "role": role}),
        SIDEBAR_COLLAPSED_KEY: "true",
    }


def test_dashboard_shell(client):
    body = {"storage": shell_storage("kam"), "current_page": "dashboardIntegrations"}

    resp = client.post("/api/dashboard/shell", json=body)

    assert resp.status_code == 200
    shell = resp.json()
    assert shell["authenticated"] is True
    assert shell["role"] == "kam"
    assert shell["role_display_name"] == "Key Account Manager"
    assert shell["sidebar_collapsed"] is True
    assert shell["overview_dashboard"] == "kam"
    assert [c["label"] for c in shell["breadcrumbs"]] == ["Dashboard", "Integrationer"]
    assert [g["group"] for g in shell["command_groups"]] == ["Navigation", "Åtgärder"]
    assert "apiPortal" in [item["id"] for item in shell["nav_items"]]

    # Same snapshot, same answer
    assert client.post("/api/dashboard/shell", json=body).json() == shell


def test_dashboard_shell_empty_storage(client):
    shell = client.post("/api/dashboard/shell", json={}).json()
    assert shell["authenticated"] is False
    assert shell["user"] is None
    assert shell["role"] == "customer"


# ── Notifications ────────────────────────────────────────

def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_notifications_require_token(client):
    assert client.get("/api/notifications").status_code == 401
    assert client.get("/api/notifications", headers={"Authorization": "Basic abc"}).status_code == 401


def test_notification_lifecycle(client):
    headers = auth("tok-notes")

    created = client.post(
        "/api/notifications",
        json={"title": "Nytt ärende", "message": "Kund väntar", "severity": "warning",
              "action_label": "Öppna", "action_page": "dashboardTickets"},
        headers=headers,
    )
    assert created.status_code == 201
    note = created.json()
    assert note["severity"] == "warning"
    assert note["action"] == {"label": "Öppna", "page": "dashboardTickets"}

    client.post("/api/notifications", json={"title": "B", "message": "b"}, headers=headers)
    listing = client.get("/api/notifications", headers=headers).json()
    assert listing["unread_count"] == 2
    assert listing["unread_badge"] == "2"
    assert listing["notifications"][1]["id"] == note["id"]

    read = client.post(f"/api/notifications/{note['id']}/read", headers=headers)
    assert read.json()["unread_count"] == 1
    assert client.post("/api/notifications/nope/read", headers=headers).status_code == 404

    assert client.post("/api/notifications/read-all", headers=headers).json() == {"updated": 1, "unread_count": 0}

    assert client.delete(f"/api/notifications/{note['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/notifications/{note['id']}", headers=headers).status_code == 404

    client.delete("/api/notifications", headers=headers)
    assert client.get("/api/notifications", headers=headers).json()["notifications"] == []

    # Other sessions never see this one's notifications
    assert client.get("/api/notifications", headers=auth("tok-other")).json()["unread_count"] == 0


def test_logout_discards_notifications(client):
    headers = auth("tok-logout")
    client.post("/api/notifications", json={"title": "A", "message": "a"}, headers=headers)

    assert client.post("/api/dashboard/logout", headers=headers).json()["discarded"] is True
    assert client.get("/api/notifications", headers=headers).json()["notifications"] == []


def test_unknown_tokens_open_no_sessions(client):
    before = len(routes.registry)

    for i in range(50):
        headers = auth(f"tok-unknown-{i}")
        assert client.get("/api/notifications", headers=headers).json()["notifications"] == []
        assert client.post("/api/notifications/read-all", headers=headers).json()["updated"] == 0
        assert client.post("/api/notifications/x/read", headers=headers).status_code == 404
        assert client.delete("/api/notifications/x", headers=headers).status_code == 404
        assert client.delete("/api/notifications", headers=headers).status_code == 200

    assert len(routes.registry) == before
