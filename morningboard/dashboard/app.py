#!/usr/bin/env python3
"""Morningboard -- FastAPI morning routine dashboard.

Run with:
    python3 -m uvicorn morningboard.dashboard.app:app --host 127.0.0.1 --port 8765
"""

from __future__ import annotations

import asyncio
import html
import json
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from morningboard.agent.client import AgentAPIError
from morningboard.agent.sources import SHUTTLE_ROUTES, FallbackDataSource, LiveDataSource
from morningboard.chat.commands import COMMANDS, help_text, suggestions
from morningboard.chat.conversation import CHAT_ERROR_TEXT, CLEARED_NOTICE, GREETING
from morningboard.chat.routes import API_VERSION, ENDPOINTS, router as v1_router
from morningboard.common.deps import get_config, get_live_source, get_widget_source
from morningboard.dashboard.preload import preload_dashboard

logger = logging.getLogger("morningboard.dashboard")

app = FastAPI(title="Morningboard", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router)


def greeting(hour: int) -> str:
    if hour < 12:
        return "Good morning"
    if hour < 17:
        return "Good afternoon"
    return "Good evening"


def _script_json(data: Any) -> str:
    """JSON safe to inline inside a <script> element."""
    return json.dumps(data).replace("</", "<\\/")


# ══════════════════════════════════════════════════════════════════════════════
#  API: index, widgets, briefing
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/api")
async def api_index() -> JSONResponse:
    return JSONResponse({
        "service": "Morningboard API",
        "description": "Proxy API for the Morningboard dashboard",
        "versions": {
            API_VERSION: {
                "endpoints": ENDPOINTS,
                "status": "stable",
                "baseUrl": f"/api/{API_VERSION}",
            },
        },
        "current_version": API_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })


_WIDGETS = ("weather", "financial", "calendar", "todos")


@app.get("/api/widgets/commute")
async def api_commute(
    direction: str = Query("to_work"),
    live: LiveDataSource = Depends(get_live_source),
) -> JSONResponse:
    if direction not in SHUTTLE_ROUTES:
        return JSONResponse({"error": f"Unknown direction: {direction}"}, status_code=400)
    try:
        data = await asyncio.to_thread(live.commute, direction)
    except AgentAPIError as exc:
        logger.warning("Error fetching commute data: %s", exc)
        return JSONResponse({"error": "Failed to load commute data"}, status_code=502)
    return JSONResponse(data)


@app.get("/api/widgets/{name}")
async def api_widget(
    name: str,
    cfg: dict[str, Any] = Depends(get_config),
    source: FallbackDataSource = Depends(get_widget_source),
) -> JSONResponse:
    """Single widget snapshot for the browser; fixture data on agent failure."""
    if name not in _WIDGETS:
        return JSONResponse({"error": f"Unknown widget: {name}"}, status_code=404)
    if name == "weather":
        data = await asyncio.to_thread(source.weather, cfg["weather"]["location"])
    elif name == "financial":
        data = await asyncio.to_thread(source.financial, cfg["financial"]["symbols"])
    elif name == "calendar":
        data = await asyncio.to_thread(source.calendar)
    else:
        data = await asyncio.to_thread(source.todos)
    return JSONResponse(data)


@app.get("/api/briefing")
async def api_briefing(source: FallbackDataSource = Depends(get_widget_source)) -> JSONResponse:
    return JSONResponse(await asyncio.to_thread(source.briefing))


# ══════════════════════════════════════════════════════════════════════════════
#  Dashboard page
# ══════════════════════════════════════════════════════════════════════════════

@app.get("/", response_class=HTMLResponse)
async def dashboard(
    cfg: dict[str, Any] = Depends(get_config),
    live: LiveDataSource = Depends(get_live_source),
) -> HTMLResponse:
    preload = await preload_dashboard(live, cfg)
    now = datetime.now()

    chat_config = {
        "commands": [
            {
                "trigger": c.trigger,
                "aliases": sorted(c.aliases),
                "action": c.action,
                "description": c.description,
                "prompt": c.prompt or "",
            }
            for c in COMMANDS
        ],
        "helpText": help_text(),
        "suggestions": suggestions(),
        "errorText": CHAT_ERROR_TEXT,
        "clearedNotice": CLEARED_NOTICE,
        "greeting": GREETING,
    }

    page = (
        DASHBOARD_HTML
        .replace("__USER_NAME__", html.escape(str(cfg.get("user_name", "there"))))
        .replace("__GREETING__", greeting(now.hour))
        .replace("__INITIAL_STATE__", _script_json(preload.to_dict()))
        .replace("__CHAT_CONFIG__", _script_json(chat_config))
    )
    return HTMLResponse(page)


DASHBOARD_HTML = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Morning Routine Dashboard</title>
<meta name="description" content="Your personalized morning routine dashboard with AI assistance">
<style>
:root {
  --bg: #0f1117; --surface: #1a1d27; --surface2: #22252f; --border: #2a2d3a;
  --text: #e0e0e6; --muted: #8b8fa3; --accent: #6c7cff;
  --green: #4ade80; --yellow: #fbbf24; --red: #f87171; --blue: #60a5fa;
  --orange: #fb923c;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
  font-family: -apple-system, BlinkMacSystemFont, 'SF Pro', 'Inter', system-ui, sans-serif;
  background: var(--bg); color: var(--text); line-height: 1.5;
}
header { padding: 24px 32px; background: var(--surface); border-bottom: 2px solid var(--border); }
header h1 { font-size: 1.5rem; font-weight: 700; }
#clock { font-size: 2.2rem; font-weight: 700; font-variant-numeric: tabular-nums; }
#date { color: var(--muted); }
.layout { display: grid; grid-template-columns: 2fr 1fr; gap: 20px; padding: 24px 32px; }
.cards { display: grid; grid-template-columns: repeat(auto-fill, minmax(280px, 1fr)); gap: 16px; }
.card {
  background: var(--surface); border: 1px solid var(--border); border-radius: 12px; padding: 16px;
}
.card h3 { font-size: 1rem; margin-bottom: 10px; display: flex; justify-content: space-between; }
.card .muted, .muted { color: var(--muted); font-size: .85rem; }
.card .error { color: var(--red); }
.card.collapsed .body { display: none; }
.up { color: var(--green); } .down { color: var(--red); }
.row { display: flex; justify-content: space-between; padding: 3px 0; }
.dot { display: inline-block; width: 8px; height: 8px; border-radius: 50%; margin-right: 6px; }
button {
  background: var(--surface2); color: var(--text); border: 1px solid var(--border);
  border-radius: 8px; padding: 4px 10px; cursor: pointer; font-size: .8rem;
}
button:disabled { opacity: .5; cursor: default; }
.chat { display: flex; flex-direction: column; height: calc(100vh - 160px); }
.chat-log { flex: 1; overflow-y: auto; display: flex; flex-direction: column; gap: 8px; }
.msg { padding: 8px 12px; border-radius: 10px; max-width: 90%; white-space: pre-wrap; }
.msg.user { align-self: flex-end; background: var(--accent); color: #fff; }
.msg.assistant { align-self: flex-start; background: var(--surface2); }
.chat-form { display: flex; gap: 8px; margin-top: 10px; }
.chat-form input {
  flex: 1; background: var(--surface2); color: var(--text); border: 1px solid var(--border);
  border-radius: 8px; padding: 8px;
}
.chips { display: flex; flex-wrap: wrap; gap: 6px; margin-top: 8px; }
@media (max-width: 900px) { .layout { grid-template-columns: 1fr; } }
</style>
</head>
<body>
<header>
  <h1>__GREETING__, __USER_NAME__</h1>
  <div id="clock"></div>
  <div id="date"></div>
</header>

<div class="layout">
  <div class="cards">
    <div class="card" id="card-weather"><h3>🌤 Weather <button onclick="toggle('weather')">–</button></h3><div class="body"></div></div>
    <div class="card" id="card-financial"><h3>📈 Markets <button onclick="toggle('financial')">–</button></h3><div class="body"></div></div>
    <div class="card" id="card-calendar"><h3>📅 Calendar <button onclick="toggle('calendar')">–</button></h3><div class="body"></div></div>
    <div class="card" id="card-todos"><h3>✅ Tasks <button onclick="toggle('todos')">–</button></h3><div class="body"></div></div>
    <div class="card" id="card-commute">
      <h3>🚗 Commute
        <span>
          <button id="dir-to_work" onclick="setDirection('to_work')">To work</button>
          <button id="dir-from_work" onclick="setDirection('from_work')">Home</button>
          <button onclick="loadCommute()">↻</button>
        </span>
      </h3>
      <div class="body"></div>
    </div>
  </div>

  <div class="card chat">
    <h3>💬 Assistant <button id="chat-clear" onclick="clearChat()">New chat</button></h3>
    <div class="chat-log" id="chat-log"></div>
    <div class="chips" id="chips"></div>
    <form class="chat-form" id="chat-form">
      <input id="chat-input" autocomplete="off" placeholder="Ask anything, or type /help">
      <button id="chat-send" type="submit">Send</button>
    </form>
  </div>
</div>

<script>
const INITIAL = __INITIAL_STATE__;
const CHAT = __CHAT_CONFIG__;
const REFRESH_MS = 5 * 60 * 1000;

/* ═══ Clock ═══ */
function tick() {
  const now = new Date();
  document.getElementById('clock').textContent = now.toLocaleTimeString('en-US', {hour: '2-digit', minute: '2-digit', second: '2-digit'});
  document.getElementById('date').textContent = now.toLocaleDateString('en-US', {weekday: 'long', year: 'numeric', month: 'long', day: 'numeric'});
}

/* ═══ Widgets ═══ */
const state = {weather: INITIAL.weather, financial: INITIAL.financial, calendar: INITIAL.calendar, todos: INITIAL.todos};
const renderers = {
  weather(d) {
    return `<div style="font-size:2rem;font-weight:700">${d.current_temp}°F</div>
      <div>${esc(d.condition)} · ${esc(d.location)}</div>
      <div class="muted">H ${d.temp_hi}° / L ${d.temp_lo}° · ${d.precip_chance}% rain</div>
      <div class="muted">${esc(d.summary || '')}</div>`;
  },
  financial(d) {
    return `<div class="muted">${esc(d.summary || '')}</div>` + (d.data || []).map(q =>
      `<div class="row"><span>${esc(q.symbol)}</span><span>$${Number(q.price).toLocaleString()}
       <span class="${q.change_percent >= 0 ? 'up' : 'down'}">${q.change_percent >= 0 ? '+' : ''}${q.change_percent}%</span></span></div>`).join('');
  },
  calendar(d) {
    const events = d.events || [];
    if (!events.length) return '<div class="muted">No events today</div>';
    return events.map(e => `<div class="row"><span><span class="dot" style="background:var(--${e.color || 'blue'})"></span>${esc(e.title)}</span><span class="muted">${esc(e.time)}</span></div>`).join('');
  },
  todos(d) {
    const items = (d.items || []).filter(i => !i.completed);
    if (!items.length) return '<div class="muted">All done!</div>';
    return items.map(i => `<div class="row"><span>${esc(i.text)}</span><span class="muted">${esc(i.priority)}</span></div>`).join('');
  },
};

function esc(s) {
  return String(s ?? '').replace(/&/g, '&amp;').replace(/</g, '&lt;').replace(/>/g, '&gt;');
}

function renderWidget(name) {
  const body = document.querySelector(`#card-${name} .body`);
  const snap = state[name];
  if (snap === undefined) { body.innerHTML = '<div class="muted">Loading…</div>'; return; }
  if (snap === null) { body.innerHTML = `<div class="error">Failed to load ${name}</div>`; return; }
  body.innerHTML = renderers[name](snap.data || {});
}

async function loadWidget(name) {
  try {
    const r = await fetch(`/api/widgets/${name}`);
    state[name] = r.ok ? await r.json() : null;
  } catch (e) {
    state[name] = null;
  }
  renderWidget(name);
}

function toggle(name) { document.getElementById(`card-${name}`).classList.toggle('collapsed'); }

/* ═══ Commute ═══ */
let direction = 'to_work';
function setDirection(d) { direction = d; loadCommute(); }
async function loadCommute() {
  const body = document.querySelector('#card-commute .body');
  body.innerHTML = '<div class="muted">Loading…</div>';
  try {
    const r = await fetch(`/api/widgets/commute?direction=${direction}`);
    const d = await r.json();
    if (!r.ok) { body.innerHTML = `<div class="error">${esc(d.error || 'Failed to load commute data')}</div>`; return; }
    const c = (d.commute || {}).data || {}, s = (d.shuttle || {}).data || {};
    let out = c.recommendation ? `<div>💡 ${esc(c.recommendation)}</div>` : '';
    if (c.driving) out += `<div class="row"><span>Drive</span><span>${c.driving.duration_minutes} min · ${esc(c.driving.traffic_status)}</span></div>`;
    if (c.transit) out += `<div class="row"><span>Caltrain + shuttle</span><span>${c.transit.total_duration_minutes} min</span></div>`;
    if (s.next_departures && s.next_departures.length) {
      out += `<div class="muted">Shuttle every ${s.frequency_minutes} min · next ${s.next_departures.slice(0, 3).map(x => esc(x.departure_time)).join(', ')}</div>`;
    }
    body.innerHTML = out || '<div class="muted">No commute data</div>';
  } catch (e) {
    body.innerHTML = '<div class="error">Failed to load commute data</div>';
  }
}

/* ═══ Chat ═══ */
const chat = {sessionId: null, pending: false, epoch: 0, transcript: [{role: 'assistant', text: CHAT.greeting}]};

function findCommand(text) {
  if (!text.startsWith('/')) return null;
  const token = text.split(/\s+/)[0].toLowerCase();
  return CHAT.commands.find(c => c.trigger === token || c.aliases.includes(token)) || null;
}

function renderChat() {
  const log = document.getElementById('chat-log');
  log.innerHTML = chat.transcript.map(t => `<div class="msg ${t.role}">${esc(t.text)}</div>`).join('');
  log.scrollTop = log.scrollHeight;
  document.getElementById('chat-send').disabled = chat.pending;
}

function clearChat() {
  chat.epoch += 1;
  chat.sessionId = null;
  chat.pending = false;
  chat.transcript = [{role: 'assistant', text: CHAT.clearedNotice}];
  renderChat();
}

async function sendChat(text) {
  if (!text.trim() || chat.pending) return;
  const cmd = findCommand(text);
  if (cmd && cmd.action === 'help') { chat.transcript.push({role: 'assistant', text: CHAT.helpText}); renderChat(); return; }
  if (cmd && cmd.action === 'clear') { clearChat(); return; }

  chat.transcript.push({role: 'user', text});
  chat.pending = true;
  renderChat();

  const epoch = chat.epoch;
  const body = {message: text};
  if (chat.sessionId) body.session_id = chat.sessionId;
  let reply = null;
  try {
    const r = await fetch('/api/v1/chat', {method: 'POST', headers: {'Content-Type': 'application/json'}, body: JSON.stringify(body)});
    if (r.ok) reply = await r.json();
  } catch (e) {
    reply = null;
  }
  if (epoch !== chat.epoch) return;
  chat.pending = false;
  if (reply) {
    if (reply.session_id && (!chat.sessionId || reply.new_session || reply.session_id !== chat.sessionId)) chat.sessionId = reply.session_id;
    chat.transcript.push({role: 'assistant', text: reply.response || ''});
  } else {
    chat.transcript.push({role: 'assistant', text: CHAT.errorText});
  }
  renderChat();
}

document.getElementById('chat-form').addEventListener('submit', ev => {
  ev.preventDefault();
  const input = document.getElementById('chat-input');
  const text = input.value;
  input.value = '';
  sendChat(text);
});

document.getElementById('chips').innerHTML = CHAT.suggestions.map(c =>
  `<button title="${esc(c.prompt)}" onclick="sendChat('${c.trigger}')">${c.trigger}</button>`).join('');

/* ═══ Init ═══ */
for (const name of Object.keys(state)) {
  if (state[name] === null) { state[name] = undefined; loadWidget(name); }
  renderWidget(name);
}
tick(); setInterval(tick, 1000);
setInterval(() => Object.keys(state).forEach(loadWidget), REFRESH_MS);
loadCommute();
renderChat();
</script>
</body>
</html>"""


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "morningboard.dashboard.app:app",
        host="127.0.0.1",
        port=8765,
        reload=False,
        log_level="info",
    )
