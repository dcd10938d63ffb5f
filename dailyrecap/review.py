"""Terminal display of an item and the per-item review prompt."""

import sys
from typing import TextIO

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.padding import Padding
from rich.rule import Rule

from dailyrecap.errors import InputTerminated
from dailyrecap.models import Annotation, ItemDetail, NotWorked, ReviewOutcome, Skipped, Worked

NO_ANSWERS = {"n", "no"}
SKIP_ANSWERS = {"skip", "s"}

PROMPT = "▶ "


def display_item(detail: ItemDetail, console: Console, comment_limit: int = 10) -> None:
    """Print an item's header fields, description and its most recent comments."""
    console.print()
    console.print(Rule(characters="═"))
    console.print(f"📋 [bold]{escape(detail.identifier)}[/bold]: {escape(detail.title)}")
    console.print(Rule(characters="═"))
    console.print()
    console.print(f"🔗 URL: {escape(detail.url)}")
    console.print(f"📊 State: {escape(detail.state.name)} ({escape(detail.state.type)})")
    console.print(f"⚡ Priority: {escape(detail.priority_label or '—')}")
    if detail.created_at:
        console.print(f"🕛 Created at: {detail.created_at}")
    if detail.updated_at:
        console.print(f"🕞 Updated at: {detail.updated_at}")
    if detail.assignee:
        console.print(f"👤 Assignee: {escape(detail.assignee)}")
    if detail.labels:
        console.print(f"🏷️  Labels: {escape(', '.join(label.name for label in detail.labels))}")

    if detail.description:
        console.print()
        console.print("📝 Description:")
        console.print(Rule(characters="─"))
        console.print(Markdown(detail.description))
        console.print(Rule(characters="─"))

    if detail.comments:
        console.print()
        console.print(f"💬 Comments ({len(detail.comments)} total):")
        shown = detail.comments[-comment_limit:] if comment_limit > 0 else []
        if len(shown) < len(detail.comments):
            console.print(f"   (Showing last {len(shown)} comments)")
        for comment in shown:
            console.print()
            console.print(f"  💭 {escape(comment.author or 'Unknown')}: {comment.updated_at or ''}")
            console.print(Padding(Markdown(comment.body), (0, 0, 0, 5)))

    console.print()


class InteractiveReviewer:
    """Asks whether the user worked on an item and collects free-form notes.

    Input is line-oriented. End of input at any point raises InputTerminated.
    """

    def __init__(self, console: Console | None = None, stream: TextIO | None = None) -> None:
        self._console = console or Console()
        self._stream = stream or sys.stdin

    def _read_line(self) -> str:
        try:
            line = self._stream.readline()
        except (OSError, ValueError) as exc:
            raise InputTerminated(f"could not read from standard input: {exc}") from exc
        if line == "":
            raise InputTerminated("standard input closed during review")
        return line

    def review(self, detail: ItemDetail) -> ReviewOutcome:
        self._console.print()
        self._console.print("❓ Did you work on this issue today? (y/n/skip)")
        self._console.print(PROMPT, end="")

        answer = self._read_line().strip().lower()
        if answer in NO_ANSWERS:
            return NotWorked()
        if answer in SKIP_ANSWERS:
            return Skipped()

        return Worked(annotation=Annotation(detail=detail, notes=self._collect_notes()))

    def _collect_notes(self) -> str:
        self._console.print()
        self._console.print("✍️  Please describe what you did on this issue:")
        self._console.print("   (Press Enter on an empty line to finish)")
        self._console.print(PROMPT, end="")

        lines: list[str] = []
        while True:
            line = self._read_line().rstrip("\r\n")
            if line == "":
                break
            lines.append(line)
            self._console.print(PROMPT, end="")
        return "\n".join(lines)
