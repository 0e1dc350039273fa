"""Slash commands for the chat panel.

Input starting with ``/`` is matched (case-insensitively, first token only)
against a fixed table. ``help`` and ``clear`` are handled locally and never
reach the agent. Every other command is sent to the agent as the user typed
it; ``prompt`` documents what the command asks for and is shown in the
help text and as a suggestion, it does not replace the outgoing message.
"""

from __future__ import annotations

from dataclasses import dataclass, field

HELP = "help"
CLEAR = "clear"
PROMPT = "prompt"


@dataclass(frozen=True)
class SlashCommand:
    trigger: str
    description: str
    action: str = PROMPT
    aliases: frozenset[str] = field(default_factory=frozenset)
    prompt: str | None = None

    def matches(self, token: str) -> bool:
        token = token.lower()
        return token == self.trigger or token in self.aliases


@dataclass(frozen=True)
class CommandMatch:
    command: SlashCommand
    text: str  # the user's literal input

    @property
    def is_local(self) -> bool:
        return self.command.action in (HELP, CLEAR)


COMMANDS: tuple[SlashCommand, ...] = (
    SlashCommand(
        "/help", "Show the available commands",
        action=HELP, aliases=frozenset({"/h", "/?"}),
    ),
    SlashCommand(
        "/summary", "Morning summary of weather, markets, calendar and tasks",
        aliases=frozenset({"/brief", "/briefing"}),
        prompt="Give me a summary of my morning: weather, markets, calendar and tasks.",
    ),
    SlashCommand(
        "/weather", "Today's weather forecast",
        aliases=frozenset({"/w"}),
        prompt="What's the weather like today?",
    ),
    SlashCommand(
        "/stocks", "Latest market quotes for my watchlist",
        aliases=frozenset({"/markets", "/finance"}),
        prompt="How are my stocks and crypto doing today?",
    ),
    SlashCommand(
        "/calendar", "Today's meetings and events",
        aliases=frozenset({"/agenda", "/schedule"}),
        prompt="What's on my calendar today?",
    ),
    SlashCommand(
        "/todos", "Pending tasks by priority",
        aliases=frozenset({"/tasks"}),
        prompt="What are my pending tasks?",
    ),
    SlashCommand(
        "/commute", "Best way to get to work right now",
        aliases=frozenset({"/traffic"}),
        prompt="What's the best way to commute to work right now?",
    ),
    SlashCommand(
        "/clear", "Start a new conversation",
        action=CLEAR, aliases=frozenset({"/new", "/reset"}),
    ),
)


def dispatch(text: str, commands: tuple[SlashCommand, ...] = COMMANDS) -> CommandMatch | None:
    """Return the matching command for ``text``, or None for a plain message."""
    if not text.startswith("/"):
        return None
    token = text.split(None, 1)[0]
    for cmd in commands:
        if cmd.matches(token):
            return CommandMatch(cmd, text)
    return None


def help_text(commands: tuple[SlashCommand, ...] = COMMANDS) -> str:
    """Format the help message listing every command except help itself."""
    lines = ["**Available commands:**", ""]
    for cmd in commands:
        if cmd.action == HELP:
            continue
        entry = f"- `{cmd.trigger}` - {cmd.description}"
        if cmd.aliases:
            entry += f" (also {', '.join(sorted(cmd.aliases))})"
        lines.append(entry)
    lines.append("")
    lines.append("Anything else is sent to the assistant as a regular message.")
    return "\n".join(lines)


def suggestions(commands: tuple[SlashCommand, ...] = COMMANDS) -> list[dict[str, str]]:
    """Command list for the chat panel's suggestion chips."""
    return [
        {"trigger": c.trigger, "description": c.description, "prompt": c.prompt or ""}
        for c in commands if c.action == PROMPT
    ]
