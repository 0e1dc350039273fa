"""Fixed payloads shown when the agent service cannot be reached.

Shapes mirror what the agent's ``/tools/*`` endpoints return so the
dashboard renders them the same way as live data.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def mock_weather(location: str = "San Francisco") -> dict[str, Any]:
    return {
        "tool": "weather",
        "data": {
            "location": location,
            "current_temp": 72,
            "condition": "Partly Cloudy",
            "temp_hi": 78,
            "temp_lo": 65,
            "precip_chance": 10,
            "summary": "Partly cloudy with comfortable temperatures",
        },
        "timestamp": _now(),
    }


_QUOTES: dict[str, dict[str, Any]] = {
    "MSFT": {"name": "Microsoft Corporation", "price": 523.73, "change": 6.23,
             "change_percent": 1.2, "data_type": "stocks"},
    "BTC": {"name": "Bitcoin", "price": 96847, "change": -2284,
            "change_percent": -2.3, "data_type": "crypto"},
    "ETH": {"name": "Ethereum", "price": 2847, "change": 42,
            "change_percent": 1.5, "data_type": "crypto"},
    "NVDA": {"name": "NVIDIA Corporation", "price": 875.12, "change": 18.2,
             "change_percent": 2.1, "data_type": "stocks"},
}


def mock_financial(symbols: list[str] | None = None) -> dict[str, Any]:
    wanted = [s.upper() for s in (symbols or list(_QUOTES))]
    items = [
        {"symbol": sym, "currency": "USD", **_QUOTES[sym]}
        for sym in wanted if sym in _QUOTES
    ]
    gaining = [i for i in items if i["change"] > 0]
    best = max(items, key=lambda i: i["change_percent"], default=None)
    summary = f"📊 {len(items)} instruments tracked | 📈 {len(gaining)} gaining"
    if best:
        summary += f" | 🏆 Best: {best['symbol']} ({best['change_percent']:+.1f}%)"
    return {
        "tool": "financial",
        "data": {
            "summary": summary,
            "total_items": len(items),
            "market_status": "mixed",
            "data": items,
        },
        "timestamp": _now(),
    }


def mock_calendar(date: str | None = None) -> dict[str, Any]:
    events = [
        {"title": "Team Standup", "time": "9:00 AM", "color": "blue"},
        {"title": "Code Review", "time": "2:00 PM", "color": "green"},
        {"title": "Gym Session", "time": "6:00 PM", "color": "orange"},
    ]
    return {
        "tool": "calendar",
        "data": {"events": events, "total_events": len(events)},
        "timestamp": _now(),
    }


def mock_todos() -> dict[str, Any]:
    items = [
        {"id": "1", "text": "Review quarterly reports", "completed": False, "priority": "high"},
        {"id": "2", "text": "Update project timeline", "completed": False, "priority": "medium"},
        {"id": "3", "text": "Call insurance company", "completed": False, "priority": "low"},
        {"id": "4", "text": "Book dentist appointment", "completed": False, "priority": "low"},
    ]
    return {
        "tool": "todos",
        "data": {
            "items": items,
            "total_pending": sum(1 for i in items if not i["completed"]),
        },
        "timestamp": _now(),
    }


def mock_briefing() -> dict[str, Any]:
    return {
        "briefing": (
            "Good morning! Here's your daily overview: Weather is pleasant at 72°F. "
            "Markets are mixed with NVDA leading gains. "
            "You have 3 meetings today and 4 pending tasks."
        ),
        "timestamp": _now(),
    }
