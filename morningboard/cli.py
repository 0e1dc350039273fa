"""Command-line interface for Morningboard.

Usage:
    python3 -m morningboard.cli serve --port 8765
    python3 -m morningboard.cli chat
    python3 -m morningboard.cli snapshot
    python3 -m morningboard.cli snapshot --offline
    python3 -m morningboard.cli briefing
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from morningboard.agent.client import AgentAPI
from morningboard.agent.sources import FallbackDataSource, FixtureDataSource, LiveDataSource
from morningboard.chat.conversation import Conversation, ConversationBusy
from morningboard.common.config import load_config, setup_logging
from morningboard.dashboard.preload import preload_dashboard


def cmd_serve(args: argparse.Namespace, cfg: dict) -> None:
    import uvicorn

    setup_logging(cfg)
    host = args.host or cfg["server"]["host"]
    port = args.port or int(cfg["server"]["port"])
    print(f"Starting Morningboard on http://{host}:{port}")
    uvicorn.run("morningboard.dashboard.app:app", host=host, port=port, reload=False, log_level="info")


def cmd_chat(args: argparse.Namespace, cfg: dict) -> None:
    api = AgentAPI.from_config(cfg)
    conv = Conversation(api)
    print(f"AI: {conv.transcript[0].text}")
    print("(type /help for commands, Ctrl-D to quit)\n")

    try:
        while True:
            try:
                text = input("> ")
            except EOFError:
                print()
                break
            before = conv.transcript
            seen = len(before)
            try:
                asyncio.run(conv.send(text))
            except ConversationBusy as exc:
                print(f"[{exc}]")
                continue
            # clear() swaps in a new transcript list
            new_turns = conv.transcript if conv.transcript is not before else conv.transcript[seen:]
            for turn in new_turns:
                if turn.role == "assistant":
                    print(f"AI: {turn.text}\n")
    except KeyboardInterrupt:
        print()
    finally:
        api.close()


def cmd_snapshot(args: argparse.Namespace, cfg: dict) -> None:
    if args.offline:
        source = FixtureDataSource()
        preload = asyncio.run(preload_dashboard(source, cfg))
    else:
        api = AgentAPI.from_config(cfg)
        try:
            preload = asyncio.run(preload_dashboard(LiveDataSource(api), cfg))
        finally:
            api.close()
    print(json.dumps(preload.to_dict(), indent=2))
    failed = [name for name, err in preload.errors.items() if err]
    if failed:
        print(f"Failed sources: {', '.join(failed)}", file=sys.stderr)
        sys.exit(1)


def cmd_briefing(args: argparse.Namespace, cfg: dict) -> None:
    api = AgentAPI.from_config(cfg)
    try:
        data = FallbackDataSource(LiveDataSource(api), FixtureDataSource()).briefing()
    finally:
        api.close()
    print(data.get("briefing", ""))


def main() -> None:
    parser = argparse.ArgumentParser(prog="morningboard", description="Morning routine dashboard")
    parser.add_argument("--config", type=str, default=None, help="Path to config.yaml")

    sub = parser.add_subparsers(dest="command", required=True)

    p_serve = sub.add_parser("serve", help="Run the dashboard web server")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)

    sub.add_parser("chat", help="Chat with the assistant in the terminal")

    p_snap = sub.add_parser("snapshot", help="Print the preloaded dashboard data as JSON")
    p_snap.add_argument("--offline", action="store_true", help="Use fixture data, no network")

    sub.add_parser("briefing", help="Print the morning briefing")

    args = parser.parse_args()
    cfg = load_config(args.config)

    dispatch = {
        "serve": cmd_serve,
        "chat": cmd_chat,
        "snapshot": cmd_snapshot,
        "briefing": cmd_briefing,
    }
    dispatch[args.command](args, cfg)


if __name__ == "__main__":
    main()
