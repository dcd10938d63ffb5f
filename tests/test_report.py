"""Tests for markdown report rendering."""

from datetime import datetime
from pathlib import Path

import pytest

from dailyrecap.models import AggregatedActivity, Annotation, ItemDetail, ReviewSession, TimeWindow
from dailyrecap.report import (
    ReportFormat,
    render_detailed,
    render_simplified,
    report_filename,
    write_report,
)

GENERATED_AT = datetime(2025, 3, 4, 17, 30, 5)


def test_report_filename() -> None:
    assert report_filename(GENERATED_AT) == "daily-summary-2025-03-04.md"


class TestDetailed:
    def test_header_uses_generation_time(self, session: ReviewSession) -> None:
        text = render_detailed(session, GENERATED_AT)
        assert text.startswith("# Daily Work Summary - Tuesday, March 4, 2025\n\n")

    def test_day_not_zero_padded(self, window: TimeWindow) -> None:
        text = render_detailed(ReviewSession(window=window), datetime(2025, 3, 1, 9, 0))
        assert "Saturday, March 1, 2025" in text

    def test_no_annotations(self, window: TimeWindow) -> None:
        text = render_detailed(ReviewSession(window=window), GENERATED_AT)
        assert text == "# Daily Work Summary - Tuesday, March 4, 2025\n\nNo work recorded for today.\n"

    def test_sections(self, session: ReviewSession) -> None:
        text = render_detailed(session, GENERATED_AT)
        assert "Worked on **2 issue(s)** today." in text
        assert "## 1. [ENG-123] Fix null check in auth middleware" in text
        assert "**Status:** In Progress | **Priority:** High" in text
        assert "🔗 [View in Linear](https://linear.app/team/issue/ENG-123)" in text
        assert "**Labels:** `bug`, `auth`" in text
        assert "### Work Completed\n\ndid x\ndid y\n\n---" in text
        assert "## 2. [ENG-456] Update docs" in text
        assert text.count("---\n") == 2
        assert text.endswith("*Generated at 2025-03-04 17:30:05*\n")

    def test_optional_parts_omitted(self, window: TimeWindow, bare_detail: ItemDetail) -> None:
        session = ReviewSession(window=window, annotations=[Annotation(detail=bare_detail)])
        text = render_detailed(session, GENERATED_AT)
        assert "**Labels:**" not in text
        assert "### Work Completed" not in text
        assert "**Priority:** —" in text


class TestSimplified:
    def test_nothing_recorded(self, window: TimeWindow) -> None:
        text = render_simplified(ReviewSession(window=window), GENERATED_AT)
        assert text == "# Daily Work Summary - Tuesday, March 4, 2025\n\nNo activity recorded for this period.\n"

    def test_activity_section_order(self, window: TimeWindow, activity: AggregatedActivity) -> None:
        text = render_simplified(ReviewSession(window=window, activity=activity), GENERATED_AT)
        lines = text.splitlines()

        assert "## GitHub Activity" in lines
        assert "## Linear Issues" not in lines
        pr = lines.index("- [org/repo#8: Fix flaky test](https://github.com/org/repo/pull/8)")
        issue = lines.index("- [org/repo#7: Flaky test](https://github.com/org/repo/issues/7)")
        review = lines.index("- [org/other#3: Add CI](https://github.com/org/other/pull/3) - Reviewed")
        commits = lines.index("- org/repo: 5 commit(s)")
        assert pr < issue < review < commits
        assert "No activity recorded for this period." not in text

    def test_activity_section_needs_non_zero_total(self, window: TimeWindow) -> None:
        activity = AggregatedActivity(commits_by_repo={"org/repo": 0})
        text = render_simplified(ReviewSession(window=window, activity=activity), GENERATED_AT)
        assert "## GitHub Activity" not in text
        assert "No activity recorded for this period." in text

    def test_tracked_issue_notes_nested_in_order(self, session: ReviewSession) -> None:
        lines = render_simplified(session, GENERATED_AT).splitlines()

        first = lines.index("- [ENG-123: Fix null check in auth middleware](https://linear.app/team/issue/ENG-123)")
        assert lines[first + 1] == "  - did x"
        assert lines[first + 2] == "  - did y"
        assert lines[first + 3] == "- [ENG-456: Update docs](https://linear.app/team/issue/ENG-456)"
        assert "## GitHub Activity" not in lines

    def test_blank_note_lines_dropped_and_trimmed(self, window: TimeWindow, bare_detail: ItemDetail) -> None:
        notes = "  first  \n\n   \nsecond"
        session = ReviewSession(window=window, annotations=[Annotation(detail=bare_detail, notes=notes)])
        lines = render_simplified(session, GENERATED_AT).splitlines()
        heading = lines.index("- [ENG-456: Update docs](https://linear.app/team/issue/ENG-456)")
        assert lines[heading + 1 : heading + 3] == ["  - first", "  - second"]

    def test_both_sections(self, session: ReviewSession, activity: AggregatedActivity) -> None:
        session.activity = activity
        text = render_simplified(session, GENERATED_AT)
        assert text.index("## GitHub Activity") < text.index("## Linear Issues")

    def test_rerender_is_identical_apart_from_timestamp(
        self, session: ReviewSession, activity: AggregatedActivity
    ) -> None:
        session.activity = activity
        first = render_simplified(session, GENERATED_AT)
        second = render_simplified(session, datetime(2025, 3, 5, 8, 0))
        assert first.splitlines()[1:] == second.splitlines()[1:]
        assert first == render_simplified(session, GENERATED_AT)


class TestWriteReport:
    @pytest.mark.parametrize(
        ("fmt", "marker"),
        [(ReportFormat.simplified, "## Linear Issues"), (ReportFormat.detailed, "### Work Completed")],
    )
    def test_writes_selected_format(
        self, tmp_path: Path, session: ReviewSession, fmt: ReportFormat, marker: str
    ) -> None:
        path = write_report(session, tmp_path, GENERATED_AT, fmt)
        assert path == tmp_path / "daily-summary-2025-03-04.md"
        assert marker in path.read_text(encoding="utf-8")

    def test_defaults_to_simplified(self, tmp_path: Path, session: ReviewSession) -> None:
        path = write_report(session, tmp_path, GENERATED_AT)
        assert "## Linear Issues" in path.read_text(encoding="utf-8")

    def test_missing_directory_raises(self, tmp_path: Path, session: ReviewSession) -> None:
        with pytest.raises(OSError):
            write_report(session, tmp_path / "does-not-exist", GENERATED_AT)
