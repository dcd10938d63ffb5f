"""Shared pydantic models: the contract between sources, reviewer and report."""

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, model_validator


class TimeWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    since: datetime
    until: datetime

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.since >= self.until:
            raise ValueError("since must be earlier than until")
        return self

    @classmethod
    def last_hours(cls, hours: int, now: datetime | None = None) -> "TimeWindow":
        """Window covering the `hours` hours that end at `now` (default: current UTC time)."""
        if hours < 1:
            raise ValueError(f"lookback must be at least 1 hour, got {hours}")
        until = now or datetime.now(UTC)
        return cls(since=until - timedelta(hours=hours), until=until)

    @property
    def hours(self) -> float:
        return (self.until - self.since).total_seconds() / 3600


class CandidateItem(BaseModel):
    """Minimal reference returned by a bulk listing call."""

    model_config = ConfigDict(frozen=True)

    id: str  # source-native ID, passed back to fetch_detail
    title: str
    url: str
    source: str  # name of the ActivitySource that listed it


class ItemState(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str  # workflow category, e.g. "started" | "completed"


class Label(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    color: str | None = None


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    author: str | None
    body: str
    created_at: str | None = None
    updated_at: str | None = None


class ItemDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    identifier: str  # ENG-123
    title: str
    description: str | None = None
    url: str
    state: ItemState
    priority: int | None = None
    priority_label: str | None = None
    labels: list[Label] = []
    comments: list[Comment] = []
    assignee: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Annotation(BaseModel):
    """A confirmed record that the user worked on an item."""

    model_config = ConfigDict(frozen=True)

    detail: ItemDetail
    notes: str = ""


class Worked(BaseModel):
    model_config = ConfigDict(frozen=True)

    annotation: Annotation


class NotWorked(BaseModel):
    model_config = ConfigDict(frozen=True)


class Skipped(BaseModel):
    model_config = ConfigDict(frozen=True)


ReviewOutcome = Worked | NotWorked | Skipped


class Contribution(BaseModel):
    """An issue or pull request from the code host's contribution feed."""

    model_config = ConfigDict(frozen=True)

    repo_owner: str
    repo_name: str
    number: int
    title: str
    url: str
    state: str | None = None  # set for created PRs only
    occurred_at: str | None = None

    @property
    def repo(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"


class AggregatedActivity(BaseModel):
    """Code-host snapshot for a window. The default instance is the zero value."""

    model_config = ConfigDict(frozen=True)

    username: str | None = None
    total_commits: int = 0
    total_issues: int = 0
    total_pull_requests: int = 0
    total_reviews: int = 0
    commits_by_repo: dict[str, int] = {}  # insertion order = source order
    issues_created: list[Contribution] = []
    pull_requests_created: list[Contribution] = []
    pull_requests_reviewed: list[Contribution] = []

    @property
    def has_activity(self) -> bool:
        return any((self.total_commits, self.total_issues, self.total_pull_requests, self.total_reviews))

    def merge(self, other: "AggregatedActivity") -> "AggregatedActivity":
        commits = dict(self.commits_by_repo)
        for repo, count in other.commits_by_repo.items():
            commits[repo] = commits.get(repo, 0) + count
        return AggregatedActivity(
            username=self.username or other.username,
            total_commits=self.total_commits + other.total_commits,
            total_issues=self.total_issues + other.total_issues,
            total_pull_requests=self.total_pull_requests + other.total_pull_requests,
            total_reviews=self.total_reviews + other.total_reviews,
            commits_by_repo=commits,
            issues_created=[*self.issues_created, *other.issues_created],
            pull_requests_created=[*self.pull_requests_created, *other.pull_requests_created],
            pull_requests_reviewed=[*self.pull_requests_reviewed, *other.pull_requests_reviewed],
        )


class ReviewSession(BaseModel):
    """In-memory state of one run. Annotations keep review order."""

    window: TimeWindow
    candidates: list[CandidateItem] = []
    annotations: list[Annotation] = []
    activity: AggregatedActivity = AggregatedActivity()
