"""Shared test fixtures."""

from datetime import UTC, datetime
from pathlib import Path

import pytest

import dailyrecap.settings as settings_module
from dailyrecap.models import (
    AggregatedActivity,
    Annotation,
    CandidateItem,
    Comment,
    Contribution,
    ItemDetail,
    ItemState,
    Label,
    ReviewSession,
    TimeWindow,
)


@pytest.fixture(autouse=True)
def no_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep ~/.config/dailyrecap/config.toml out of every DailySettings() built in tests."""
    settings_module._load_toml.cache_clear()
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "no-config.toml")
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def window() -> TimeWindow:
    return TimeWindow.last_hours(24, now=datetime(2025, 3, 4, 18, 0, tzinfo=UTC))


@pytest.fixture
def candidate() -> CandidateItem:
    return CandidateItem(
        id="issue_abc123",
        title="Fix null check in auth middleware",
        url="https://linear.app/team/issue/ENG-123",
        source="linear",
    )


@pytest.fixture
def detail() -> ItemDetail:
    return ItemDetail(
        id="issue_abc123",
        identifier="ENG-123",
        title="Fix null check in auth middleware",
        description="The middleware throws when session is None.",
        url="https://linear.app/team/issue/ENG-123",
        state=ItemState(name="In Progress", type="started"),
        priority=2,
        priority_label="High",
        labels=[Label(name="bug", color="#ff0000"), Label(name="auth", color="#00ff00")],
        comments=[Comment(author="Jane Doe", body="Looking into it", updated_at="2025-03-04T10:00:00Z")],
        assignee="Jane Doe",
        created_at="2025-03-01T09:00:00Z",
        updated_at="2025-03-04T10:00:00Z",
    )


@pytest.fixture
def bare_detail() -> ItemDetail:
    return ItemDetail(
        id="issue_def456",
        identifier="ENG-456",
        title="Update docs",
        url="https://linear.app/team/issue/ENG-456",
        state=ItemState(name="Todo", type="unstarted"),
    )


@pytest.fixture
def activity() -> AggregatedActivity:
    return AggregatedActivity(
        username="jdoe",
        total_commits=5,
        total_issues=1,
        total_pull_requests=1,
        total_reviews=1,
        commits_by_repo={"org/repo": 5},
        issues_created=[
            Contribution(
                repo_owner="org",
                repo_name="repo",
                number=7,
                title="Flaky test",
                url="https://github.com/org/repo/issues/7",
            )
        ],
        pull_requests_created=[
            Contribution(
                repo_owner="org",
                repo_name="repo",
                number=8,
                title="Fix flaky test",
                url="https://github.com/org/repo/pull/8",
                state="OPEN",
            )
        ],
        pull_requests_reviewed=[
            Contribution(
                repo_owner="org",
                repo_name="other",
                number=3,
                title="Add CI",
                url="https://github.com/org/other/pull/3",
            )
        ],
    )


@pytest.fixture
def session(window: TimeWindow, detail: ItemDetail, bare_detail: ItemDetail) -> ReviewSession:
    return ReviewSession(
        window=window,
        annotations=[
            Annotation(detail=detail, notes="did x\ndid y"),
            Annotation(detail=bare_detail, notes=""),
        ],
    )
