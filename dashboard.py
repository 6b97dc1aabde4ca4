"""Server-rendered pages: marketing home, login, dashboard shell and 404."""

import html

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, JSONResponse

from config import settings
from session import AUTH_TOKEN_KEY, SIDEBAR_COLLAPSED_KEY, USER_KEY

dashboard_router = APIRouter()

# Audience filter copy: who Siteflow is for, and who it is not for
RIGHT_FIT = [
    "Ser tekniska system som en långsiktig investering",
    "Är trött på 'brandkårsutryckningar' och krascher",
    "Planerar att skala upp kraftigt inom ett år",
    "Värdesätter kvalitet som sänker kostnaden över tid",
]
WRONG_FIT = [
    "Söker den absolut billigaste lösningen just nu",
    "Bara behöver en enkel presentationssida",
    "Vill ha en 'quick fix' utan att lösa grundproblemet",
    "Älskar buzzwords och 'tech-bro' kultur",
]

BASE_CSS = """
    :root {
        --bg: #f8fafc; --card: #ffffff; --text: #0f172a; --muted: #64748b;
        --primary: #2563eb; --success: #16a34a; --danger: #dc2626; --border: #e2e8f0;
    }
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body { font-family: Inter, -apple-system, BlinkMacSystemFont, sans-serif; background: var(--bg); color: var(--text); }
    a { color: var(--primary); text-decoration: none; }
    button { cursor: pointer; border: 0; border-radius: 8px; padding: 10px 16px; background: var(--primary); color: #fff; font-weight: 600; }
    button.ghost { background: transparent; color: var(--text); }
    input, textarea { width: 100%; padding: 10px; border: 1px solid var(--border); border-radius: 8px; font: inherit; }
    .container { max-width: 960px; margin: 0 auto; padding: 48px 24px; }
    .card { background: var(--card); border: 1px solid var(--border); border-radius: 16px; padding: 32px; }
    .muted { color: var(--muted); }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 24px; }
    .hidden { display: none !important; }
"""


def _list_items(items: list[str]) -> str:
    return "\n".join(f"<li>{html.escape(item)}</li>" for item in items)


def _page(title: str, body: str, extra_css: str = "") -> str:
    return f"""<!DOCTYPE html>
<html lang="sv">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    <style>{BASE_CSS}{extra_css}</style>
</head>
<body>
{body}
</body>
</html>
"""


HOME_BODY = """
<section class="container">
    <h1>Digitala system som flödar som vatten</h1>
    <p class="muted">Följsamma, självläkande och byggda för att skala.</p>
</section>

<section class="container card" id="consultation">
    <h2>Beskriv ditt problem</h2>
    <p class="muted">Vår arkitekt-AI bedömer hur väl vår arkitektur passar.</p>
    <textarea id="problem" rows="4" placeholder="Vårt system kraschar när trafiken ökar..."></textarea>
    <p><button id="assess">Analysera</button></p>
    <div id="result" class="hidden">
        <h3>Matchning: <span id="score"></span>/100</h3>
        <p id="analysis"></p>
    </div>
</section>

<section class="container" id="audience">
    <h2>Vem vi är till för</h2>
    <p class="muted">Om du är nöjd med hur det är idag, är vi förmodligen inte rätt för dig.</p>
    <div class="grid">
        <div class="card"><h3>Vi ska prata om du:</h3><ul>__RIGHT_FIT__</ul></div>
        <div class="card"><h3>Vi är inte rätt om du:</h3><ul class="muted">__WRONG_FIT__</ul></div>
    </div>
</section>

<section class="container"><a href="/login">Logga in till dashboard</a></section>

<script>
const FALLBACK = {
    analysis: "Vi kunde inte analysera detta just nu, men det låter som något vi borde diskutera personligen.",
    fitScore: 0,
};

document.getElementById("assess").addEventListener("click", async () => {
    const userProblem = document.getElementById("problem").value.trim();
    if (!userProblem) return;
    let data = FALLBACK;
    try {
        const resp = await fetch("/api/assess-system-needs", {
            method: "POST",
            headers: {"Content-Type": "application/json"},
            body: JSON.stringify({userProblem}),
        });
        if (resp.ok) data = await resp.json();
    } catch (e) {
        console.error("Assessment failed", e);
    }
    document.getElementById("score").textContent = data.fitScore;
    document.getElementById("analysis").textContent = data.analysis;
    document.getElementById("result").classList.remove("hidden");
});
</script>
"""

LOGIN_BODY = """
<section class="container" style="max-width: 420px">
    <div class="card">
        <h2>Logga in</h2>
        <form id="login">
            <p><input id="email" type="email" placeholder="E-post" required></p>
            <p><input id="password" type="password" placeholder="Lösenord" required></p>
            <p><button type="submit">Logga in</button></p>
            <p id="error" class="hidden" style="color: var(--danger)"></p>
        </form>
    </div>
</section>

<script>
const AUTH_API_URL = "__AUTH_API_URL__";

document.getElementById("login").addEventListener("submit", async (event) => {
    event.preventDefault();
    const errorEl = document.getElementById("error");
    errorEl.classList.add("hidden");
    try {
        const resp = await fetch(`${AUTH_API_URL}/api/auth/sign-in`, {
            method: "POST",
            headers: {"Content-Type": "application/json"},
            body: JSON.stringify({user: {
                email: document.getElementById("email").value,
                password: document.getElementById("password").value,
            }}),
        });
        const data = await resp.json();
        if (!resp.ok) throw new Error(data.error || "Login failed");
        localStorage.setItem("__AUTH_TOKEN_KEY__", data.token);
        localStorage.setItem("__USER_KEY__", JSON.stringify(data.user));
        window.location.href = "/dashboard";
    } catch (e) {
        errorEl.textContent = e.message;
        errorEl.classList.remove("hidden");
    }
});
</script>
"""

DASHBOARD_CSS = """
    body { display: flex; min-height: 100vh; }
    aside { width: 240px; background: #0f172a; color: #e2e8f0; padding: 16px 8px; transition: width 200ms; }
    aside.collapsed { width: 64px; }
    aside.collapsed .label { display: none; }
    aside a { display: block; color: inherit; padding: 8px 12px; border-radius: 8px; }
    aside a.active, aside a:hover { background: #1e293b; }
    main { flex: 1; }
    header { display: flex; align-items: center; gap: 16px; padding: 12px 24px; background: var(--card); border-bottom: 1px solid var(--border); }
    header .spacer { flex: 1; }
    #crumbs span + span::before { content: " / "; color: var(--muted); }
    #palette { position: fixed; top: 15%; left: 50%; transform: translateX(-50%); width: 480px; }
    #palette ul { list-style: none; max-height: 320px; overflow-y: auto; }
    #palette li { padding: 6px 8px; cursor: pointer; border-radius: 6px; }
    #palette li:hover { background: var(--bg); }
    .badge { background: var(--danger); color: #fff; border-radius: 999px; padding: 0 6px; font-size: 12px; }
    #bell-panel { position: absolute; right: 24px; top: 56px; width: 320px; }
    #bell-panel li.unread { font-weight: 600; }
"""

DASHBOARD_BODY = """
<aside id="sidebar">
    <button class="ghost" id="collapse" style="color: inherit">☰</button>
    <nav id="nav"></nav>
</aside>
<main>
    <header>
        <div id="crumbs"></div>
        <div class="spacer"></div>
        <button class="ghost" id="open-palette">⌘K</button>
        <button class="ghost" id="bell">🔔 <span id="unread" class="badge hidden"></span></button>
        <span id="who" class="muted"></span>
    </header>
    <div class="card hidden" id="bell-panel">
        <p><button class="ghost" id="read-all">Markera alla som lästa</button></p>
        <ul id="notes"></ul>
    </div>
    <section class="container" id="content"></section>
</main>
<div class="card hidden" id="palette">
    <input id="palette-query" placeholder="Sök sidor och åtgärder...">
    <div id="palette-results"></div>
</div>

<script>
const KEYS = {token: "__AUTH_TOKEN_KEY__", user: "__USER_KEY__", collapsed: "__SIDEBAR_COLLAPSED_KEY__"};
const params = new URLSearchParams(window.location.search);
let currentPage = params.get("page") || "dashboard";
let shell = null;

function snapshot() {
    const storage = {};
    Object.values(KEYS).forEach((k) => { storage[k] = localStorage.getItem(k); });
    return storage;
}

function authHeaders() {
    const token = localStorage.getItem(KEYS.token);
    return token ? {"Authorization": `Bearer ${token}`} : {};
}

function navigate(page) {
    if (page === "home") { window.location.href = "/"; return; }
    currentPage = page;
    history.replaceState(null, "", `/dashboard?page=${encodeURIComponent(page)}`);
    render();
}

async function logout() {
    await fetch("/api/dashboard/logout", {method: "POST", headers: authHeaders()});
    localStorage.removeItem(KEYS.token);
    localStorage.removeItem(KEYS.user);
    window.location.href = "/login";
}

function renderPalette(query) {
    const results = document.getElementById("palette-results");
    results.innerHTML = "";
    const needle = (query || "").trim().toLowerCase();
    shell.command_groups.forEach(({group, items}) => {
        const matches = items.filter((item) => !needle
            || item.label.toLowerCase().includes(needle)
            || item.keywords.some((kw) => kw.toLowerCase().includes(needle)));
        if (!matches.length) return;
        const heading = document.createElement("h4");
        heading.textContent = group;
        const list = document.createElement("ul");
        matches.forEach((item) => {
            const li = document.createElement("li");
            li.textContent = item.label;
            li.onclick = () => {
                document.getElementById("palette").classList.add("hidden");
                if (item.action === "logout") logout(); else navigate(item.page);
            };
            list.appendChild(li);
        });
        results.append(heading, list);
    });
}

async function loadNotifications() {
    if (!shell.authenticated) return;
    const resp = await fetch("/api/notifications", {headers: authHeaders()});
    if (!resp.ok) return;
    const data = await resp.json();
    const badge = document.getElementById("unread");
    badge.textContent = data.unread_badge;
    badge.classList.toggle("hidden", data.unread_count === 0);
    const list = document.getElementById("notes");
    list.innerHTML = "";
    data.notifications.forEach((n) => {
        const li = document.createElement("li");
        li.className = n.read ? "" : "unread";
        li.textContent = `${n.title}: ${n.message}`;
        li.onclick = async () => {
            await fetch(`/api/notifications/${n.id}/read`, {method: "POST", headers: authHeaders()});
            loadNotifications();
        };
        list.appendChild(li);
    });
}

async function render() {
    const resp = await fetch("/api/dashboard/shell", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify({storage: snapshot(), current_page: currentPage}),
    });
    shell = await resp.json();
    if (!shell.authenticated) { window.location.href = "/login"; return; }

    document.getElementById("sidebar").classList.toggle("collapsed", shell.sidebar_collapsed);
    const nav = document.getElementById("nav");
    nav.innerHTML = "";
    shell.nav_items.forEach((item) => {
        const a = document.createElement("a");
        a.href = "#";
        a.title = item.label;
        a.className = item.page === currentPage ? "active" : "";
        a.innerHTML = `<span class="label"></span>`;
        a.querySelector(".label").textContent = item.label;
        a.onclick = (e) => { e.preventDefault(); navigate(item.page); };
        nav.appendChild(a);
    });

    const crumbs = document.getElementById("crumbs");
    crumbs.innerHTML = "";
    shell.breadcrumbs.forEach((crumb) => {
        const span = document.createElement("span");
        span.textContent = crumb.label;
        if (crumb.page) span.onclick = () => navigate(crumb.page);
        crumbs.appendChild(span);
    });

    document.getElementById("who").textContent = `${shell.user.name} · ${shell.role_display_name}`;
    const heading = shell.breadcrumbs[shell.breadcrumbs.length - 1].label;
    document.getElementById("content").textContent = currentPage === "dashboard"
        ? `Översikt (${shell.overview_dashboard})`
        : heading;
    loadNotifications();
}

document.getElementById("collapse").onclick = () => {
    const collapsed = !document.getElementById("sidebar").classList.contains("collapsed");
    localStorage.setItem(KEYS.collapsed, JSON.stringify(collapsed));
    document.getElementById("sidebar").classList.toggle("collapsed", collapsed);
};
document.getElementById("open-palette").onclick = () => {
    document.getElementById("palette").classList.toggle("hidden");
    renderPalette(document.getElementById("palette-query").value);
    document.getElementById("palette-query").focus();
};
document.getElementById("palette-query").oninput = (e) => renderPalette(e.target.value);
document.getElementById("bell").onclick = () => document.getElementById("bell-panel").classList.toggle("hidden");
document.getElementById("read-all").onclick = async () => {
    await fetch("/api/notifications/read-all", {method: "POST", headers: authHeaders()});
    loadNotifications();
};
document.addEventListener("keydown", (e) => {
    if ((e.metaKey || e.ctrlKey) && e.key === "k") {
        e.preventDefault();
        document.getElementById("open-palette").click();
    }
    if (e.key === "Escape") document.getElementById("palette").classList.add("hidden");
});

render();
</script>
"""

NOT_FOUND_BODY = """
<section class="container">
    <h1>404</h1>
    <p class="muted">Sidan du letar efter finns inte.</p>
    <p><a href="/">Till startsidan</a></p>
</section>
"""


def render_home() -> str:
    body = HOME_BODY.replace("__RIGHT_FIT__", _list_items(RIGHT_FIT)).replace(
        "__WRONG_FIT__", _list_items(WRONG_FIT)
    )
    return _page("Siteflow", body)


def render_login() -> str:
    body = (
        LOGIN_BODY.replace("__AUTH_API_URL__", settings.auth_api_url.rstrip("/"))
        .replace("__AUTH_TOKEN_KEY__", AUTH_TOKEN_KEY)
        .replace("__USER_KEY__", USER_KEY)
    )
    return _page("Logga in · Siteflow", body)


def render_dashboard() -> str:
    body = (
        DASHBOARD_BODY.replace("__AUTH_TOKEN_KEY__", AUTH_TOKEN_KEY)
        .replace("__USER_KEY__", USER_KEY)
        .replace("__SIDEBAR_COLLAPSED_KEY__", SIDEBAR_COLLAPSED_KEY)
    )
    return _page("Dashboard · Siteflow", body, DASHBOARD_CSS)


@dashboard_router.get("/", response_class=HTMLResponse)
async def home():
    return render_home()


@dashboard_router.get("/login", response_class=HTMLResponse)
async def login():
    return render_login()


@dashboard_router.get("/dashboard", response_class=HTMLResponse)
async def dashboard():
    return render_dashboard()


@dashboard_router.get("/{path:path}", include_in_schema=False)
async def not_found(path: str):
    if path.startswith("api/"):
        return JSONResponse(status_code=404, content={"detail": "Not Found"})
    return HTMLResponse(_page("Sidan hittades inte · Siteflow", NOT_FOUND_BODY), status_code=404)
