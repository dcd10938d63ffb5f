"""One run: fetch, review each candidate, write the report."""

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from dailyrecap.errors import ReportWriteError, SourceError
from dailyrecap.models import CandidateItem, ItemDetail, NotWorked, ReviewSession, Skipped, TimeWindow, Worked
from dailyrecap.report import ReportFormat, write_report
from dailyrecap.review import InteractiveReviewer, display_item
from dailyrecap.sources.base import ActivitySource


class Orchestrator:
    """Drives sources, reviewer and report generator for a single invocation.

    Sources are consulted in registration order. A failing source with
    `required=True` aborts the run by re-raising; any other failure is reported
    as a warning and that source's contribution is left out.
    """

    def __init__(
        self,
        sources: Sequence[ActivitySource],
        reviewer: InteractiveReviewer,
        console: Console | None = None,
        comment_limit: int = 10,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._sources = list(sources)
        self._by_name = {source.name: source for source in self._sources}
        self._reviewer = reviewer
        self._console = console or Console()
        self._comment_limit = comment_limit
        self._clock = clock

    def _warn(self, message: str) -> None:
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def collect(self, window: TimeWindow) -> ReviewSession:
        """Fetch aggregates and candidates from every capable source."""
        session = ReviewSession(window=window)

        for source in self._sources:
            if not source.supports_aggregate:
                continue
            self._console.print(f"Fetching {source.name} activity...")
            try:
                session.activity = session.activity.merge(source.fetch_aggregate(window))
            except SourceError as exc:
                if source.required:
                    raise
                self._warn(f"Could not fetch {source.name} activity: {exc}")

        for source in self._sources:
            if not source.supports_candidates:
                continue
            self._console.print(f"Fetching {source.name} issues...")
            try:
                session.candidates += source.list_candidates(window)
            except SourceError as exc:
                if source.required:
                    raise
                self._warn(f"Could not list {source.name} issues: {exc}")

        return session

    def review(self, session: ReviewSession) -> None:
        """Run the interactive prompt over each candidate, in listing order."""
        total = len(session.candidates)
        for position, candidate in enumerate(session.candidates, start=1):
            self._console.print(f"\n[dim]({position}/{total})[/dim] {escape(candidate.title)}")
            detail = self._fetch_detail(candidate)
            if detail is None:
                continue
            display_item(detail, self._console, comment_limit=self._comment_limit)

            match self._reviewer.review(detail):
                case Worked(annotation=annotation):
                    session.annotations.append(annotation)
                    self._console.print(f"[green]✓[/green] Recorded work on {escape(detail.identifier)}")
                case NotWorked():
                    self._console.print(f"[dim]Not worked on {escape(detail.identifier)}[/dim]")
                case Skipped():
                    self._console.print(f"[dim]Skipped {escape(detail.identifier)}[/dim]")

    def _fetch_detail(self, candidate: CandidateItem) -> ItemDetail | None:
        source = self._by_name.get(candidate.source)
        if source is None or not source.supports_detail:
            self._warn(f"No detail available for '{candidate.title}', skipping")
            return None
        try:
            return source.fetch_detail(candidate.id)
        except SourceError as exc:
            self._warn(f"Could not fetch details for '{candidate.title}': {exc}")
            return None

    def run(
        self,
        hours: int = 24,
        output_dir: Path = Path("."),
        fmt: ReportFormat = ReportFormat.simplified,
    ) -> Path | None:
        """Execute a full run. Returns the report path, or None when there was nothing to report."""
        window = TimeWindow.last_hours(hours)
        session = self.collect(window)

        if not session.candidates and not session.activity.has_activity:
            self._console.print("No activity found for this period.")
            return None

        self._console.print(f"Found {len(session.candidates)} issue(s) to review.")
        self.review(session)

        try:
            return write_report(session, output_dir, self._clock(), fmt)
        except OSError as exc:
            raise ReportWriteError(f"Failed to write summary file: {exc}") from exc
