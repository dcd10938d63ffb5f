"""GitHub GraphQL contributions source."""

import subprocess

import httpx
from pydantic import ValidationError

from dailyrecap.errors import ConfigurationError, DecodeError, TransportError
from dailyrecap.models import AggregatedActivity, Contribution, TimeWindow
from dailyrecap.settings import DailySettings
from dailyrecap.sources.base import ActivitySource, graphql_error_message

ENDPOINT = "https://api.github.com/graphql"

_VIEWER_ACTIVITY = """
query ViewerActivity($from: DateTime!, $to: DateTime!) {
  viewer {
    login
    contributionsCollection(from: $from, to: $to) {
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      commitContributionsByRepository {
        repository { name owner { login } }
        contributions(first: 100) { nodes { commitCount occurredAt } }
      }
      issueContributions(first: 100) {
        nodes {
          issue { title url number repository { name owner { login } } }
          occurredAt
        }
      }
      pullRequestContributions(first: 100) {
        nodes {
          pullRequest { title url number state repository { name owner { login } } }
          occurredAt
        }
      }
      pullRequestReviewContributions(first: 100) {
        nodes {
          pullRequest { title url number repository { name owner { login } } }
          occurredAt
        }
      }
    }
  }
}
"""


def _contribution(node: dict, key: str) -> Contribution:
    item = node[key]
    repository = item["repository"]
    return Contribution(
        repo_owner=repository["owner"]["login"],
        repo_name=repository["name"],
        number=item["number"],
        title=item["title"],
        url=item["url"],
        state=item.get("state"),
        occurred_at=node.get("occurredAt"),
    )


class GitHubSource(ActivitySource):
    name = "github"
    supports_aggregate = True

    def __init__(self, settings: DailySettings, required: bool = False) -> None:
        super().__init__(required=required)
        self._settings = settings
        self._token: str | None = None

    def _resolve_token(self) -> str:
        if self._token:
            return self._token
        if self._settings.github_auth == "gh-cli":
            try:
                result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True)
            except FileNotFoundError as exc:
                raise ConfigurationError("gh CLI not found. Install it or set github.auth = \"token\".") from exc
            except OSError as exc:
                raise ConfigurationError(f"Could not run gh CLI: {exc}") from exc
            if result.returncode != 0:
                raise ConfigurationError("gh auth token failed. Run: gh auth login")
            self._token = result.stdout.strip()
        elif self._settings.github_api_token:
            self._token = self._settings.github_api_token.get_secret_value()
        if not self._token:
            raise ConfigurationError(
                "github.api_token is not configured. Set DAILY_GITHUB_API_TOKEN or api_token under [github]."
            )
        return self._token

    def _gql(self, query: str, variables: dict) -> dict:
        token = self._resolve_token()
        try:
            response = httpx.post(
                ENDPOINT,
                json={"query": query, "variables": variables},
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=30,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Error querying GitHub's API: {exc}") from exc
        if response.status_code == 401:
            raise ConfigurationError("GitHub API returned 401. Check github.api_token.")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(f"GitHub API returned {response.status_code}") from exc
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(f"GitHub returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise DecodeError("GitHub response is not a JSON object")
        if data.get("errors"):
            raise DecodeError(f"GitHub API error: {graphql_error_message(data['errors'])}")
        if not isinstance(data.get("data"), dict):
            raise DecodeError("GitHub response has no data")
        return data["data"]

    def fetch_aggregate(self, window: TimeWindow) -> AggregatedActivity:
        data = self._gql(
            _VIEWER_ACTIVITY,
            {"from": window.since.isoformat(), "to": window.until.isoformat()},
        )
        try:
            viewer = data["viewer"]
            collection = viewer["contributionsCollection"]

            commits_by_repo: dict[str, int] = {}
            for repo_contrib in collection["commitContributionsByRepository"]:
                repository = repo_contrib["repository"]
                key = f"{repository['owner']['login']}/{repository['name']}"
                commits_by_repo[key] = sum(n["commitCount"] for n in repo_contrib["contributions"]["nodes"])

            return AggregatedActivity(
                username=viewer.get("login"),
                total_commits=collection["totalCommitContributions"],
                total_issues=collection["totalIssueContributions"],
                total_pull_requests=collection["totalPullRequestContributions"],
                total_reviews=collection["totalPullRequestReviewContributions"],
                commits_by_repo=commits_by_repo,
                issues_created=[_contribution(n, "issue") for n in collection["issueContributions"]["nodes"]],
                pull_requests_created=[
                    _contribution(n, "pullRequest") for n in collection["pullRequestContributions"]["nodes"]
                ],
                pull_requests_reviewed=[
                    _contribution(n, "pullRequest") for n in collection["pullRequestReviewContributions"]["nodes"]
                ],
            )
        except (KeyError, TypeError, ValidationError) as exc:
            raise DecodeError(f"Unexpected GitHub response shape: {exc}") from exc
