"""Markdown report rendering."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from dailyrecap.models import Contribution, ReviewSession


class ReportFormat(str, Enum):
    simplified = "simplified"
    detailed = "detailed"


def report_filename(generated_at: datetime) -> str:
    return f"daily-summary-{generated_at:%Y-%m-%d}.md"


def _header(generated_at: datetime) -> str:
    # e.g. "Monday, January 2, 2006" without a zero-padded day
    day = f"{generated_at:%A}, {generated_at:%B} {generated_at.day}, {generated_at.year}"
    return f"# Daily Work Summary - {day}"


def _contribution_link(item: Contribution) -> str:
    return f"[{item.repo}#{item.number}: {item.title}]({item.url})"


def render_detailed(session: ReviewSession, generated_at: datetime) -> str:
    """One numbered section per annotation, with status, labels and notes."""
    lines = [_header(generated_at), ""]

    if not session.annotations:
        lines.append("No work recorded for today.")
        return "\n".join(lines) + "\n"

    lines += [
        "## Summary",
        "",
        f"Worked on **{len(session.annotations)} issue(s)** today.",
        "",
    ]

    for index, annotation in enumerate(session.annotations, start=1):
        detail = annotation.detail
        lines += [
            f"## {index}. [{detail.identifier}] {detail.title}",
            "",
            f"**Status:** {detail.state.name} | **Priority:** {detail.priority_label or '—'}",
            "",
            f"🔗 [View in Linear]({detail.url})",
            "",
        ]
        if detail.labels:
            labels = ", ".join(f"`{label.name}`" for label in detail.labels)
            lines += [f"**Labels:** {labels}", ""]
        if annotation.notes:
            lines += ["### Work Completed", "", annotation.notes, ""]
        lines += ["---", ""]

    lines += ["", f"*Generated at {generated_at:%Y-%m-%d %H:%M:%S}*"]
    return "\n".join(lines) + "\n"


def render_simplified(session: ReviewSession, generated_at: datetime) -> str:
    """Code-host activity bullets followed by annotated issues with nested note bullets."""
    lines = [_header(generated_at), ""]
    activity = session.activity

    if activity.has_activity:
        lines += ["## GitHub Activity", ""]
        groups = [
            [f"- {_contribution_link(pr)}" for pr in activity.pull_requests_created],
            [f"- {_contribution_link(issue)}" for issue in activity.issues_created],
            [f"- {_contribution_link(pr)} - Reviewed" for pr in activity.pull_requests_reviewed],
            [f"- {repo}: {count} commit(s)" for repo, count in activity.commits_by_repo.items()],
        ]
        for group in groups:
            if group:
                lines += [*group, ""]

    if session.annotations:
        lines += ["## Linear Issues", ""]
        for annotation in session.annotations:
            detail = annotation.detail
            lines.append(f"- [{detail.identifier}: {detail.title}]({detail.url})")
            for note in annotation.notes.split("\n"):
                if note.strip():
                    lines.append(f"  - {note.strip()}")
        lines.append("")

    if not activity.has_activity and not session.annotations:
        lines.append("No activity recorded for this period.")

    return "\n".join(lines) + "\n"


_RENDERERS = {
    ReportFormat.simplified: render_simplified,
    ReportFormat.detailed: render_detailed,
}


def write_report(
    session: ReviewSession,
    directory: Path,
    generated_at: datetime,
    fmt: ReportFormat = ReportFormat.simplified,
) -> Path:
    """Render the whole document in memory, then write it in one call.

    Raises OSError if the file cannot be created or written.
    """
    content = _RENDERERS[fmt](session, generated_at)
    path = directory / report_filename(generated_at)
    path.write_text(content, encoding="utf-8")
    return path
