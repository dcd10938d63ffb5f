"""Linear GraphQL issue-tracker source."""

import httpx
from pydantic import ValidationError

from dailyrecap.errors import ConfigurationError, DecodeError, InvalidArgument, TransportError
from dailyrecap.models import CandidateItem, Comment, ItemDetail, ItemState, Label, TimeWindow
from dailyrecap.settings import DailySettings
from dailyrecap.sources.base import ActivitySource, graphql_error_message

# Linear's `updatedAt` filter is evaluated at day granularity for short windows.
MIN_FILTER = "-P1D"

_LIST_ASSIGNED = """
query MyAssignedIssues($updatedSince: DateTimeOrDuration!) {
  viewer {
    assignedIssues(filter: { updatedAt: { gte: $updatedSince } }) {
      nodes {
        id
        title
        url
      }
    }
  }
}
"""

_GET_ISSUE_DETAILS = """
query GetIssueDetails($id: String!) {
  issue(id: $id) {
    id
    identifier
    title
    description
    url
    state { name type }
    priority
    priorityLabel
    labels { nodes { name color } }
    comments { nodes { id body createdAt updatedAt user { name } } }
    assignee { name email }
    createdAt
    updatedAt
  }
}
"""


def updated_since_filter(window: TimeWindow) -> str:
    """ISO-8601 negative duration for the listing filter.

    Windows shorter than a day are pinned to MIN_FILTER.
    """
    total_hours = int(window.hours)
    if total_hours < 24:
        return MIN_FILTER
    days, hours = divmod(total_hours, 24)
    if hours:
        return f"-P{days}DT{hours}H"
    return f"-P{days}D"


class LinearSource(ActivitySource):
    name = "linear"
    supports_candidates = True
    supports_detail = True

    def __init__(self, settings: DailySettings, required: bool = True) -> None:
        super().__init__(required=required)
        self._api_token = settings.linear_api_token.get_secret_value() if settings.linear_api_token else ""
        self._endpoint = settings.linear_base_url

    def _check_config(self) -> None:
        if not self._endpoint:
            raise ConfigurationError("linear.base_url is not configured. Set DAILY_LINEAR_BASE_URL.")
        if not self._api_token:
            raise ConfigurationError(
                "linear.api_token is not configured. Set DAILY_LINEAR_API_TOKEN or api_token under [linear]."
            )

    def _gql(self, query: str, variables: dict | None = None) -> dict:
        self._check_config()
        try:
            response = httpx.post(
                self._endpoint,
                json={"query": query, "variables": variables or {}},
                headers={
                    "Authorization": self._api_token,
                    "Content-Type": "application/json",
                },
                timeout=30,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Error querying Linear's API: {exc}") from exc
        if response.status_code == 401:
            raise ConfigurationError("Linear API returned 401. Check linear.api_token.")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(f"Linear API returned {response.status_code}") from exc
        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError(f"Linear returned invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise DecodeError("Linear response is not a JSON object")
        if data.get("errors"):
            raise DecodeError(f"Linear API error: {graphql_error_message(data['errors'])}")
        if not isinstance(data.get("data"), dict):
            raise DecodeError("Linear response has no data")
        return data["data"]

    def _detail_from_node(self, node: dict) -> ItemDetail:
        labels = [Label(name=n["name"], color=n.get("color")) for n in (node.get("labels") or {}).get("nodes", [])]
        comments = [
            Comment(
                author=(c.get("user") or {}).get("name"),
                body=c.get("body") or "",
                created_at=c.get("createdAt"),
                updated_at=c.get("updatedAt"),
            )
            for c in (node.get("comments") or {}).get("nodes", [])
        ]
        return ItemDetail(
            id=node["id"],
            identifier=node["identifier"],
            title=node["title"],
            description=node.get("description"),
            url=node["url"],
            state=ItemState(name=node["state"]["name"], type=node["state"]["type"]),
            priority=node.get("priority"),
            priority_label=node.get("priorityLabel"),
            labels=labels,
            comments=comments,
            assignee=node["assignee"]["name"] if node.get("assignee") else None,
            created_at=node.get("createdAt"),
            updated_at=node.get("updatedAt"),
        )

    def list_candidates(self, window: TimeWindow) -> list[CandidateItem]:
        data = self._gql(_LIST_ASSIGNED, {"updatedSince": updated_since_filter(window)})
        try:
            nodes = data["viewer"]["assignedIssues"]["nodes"]
            return [CandidateItem(id=n["id"], title=n["title"], url=n["url"], source=self.name) for n in nodes]
        except (KeyError, TypeError, ValidationError) as exc:
            raise DecodeError(f"Unexpected Linear response shape: {exc}") from exc

    def fetch_detail(self, item_id: str) -> ItemDetail:
        if not item_id:
            raise InvalidArgument("issue id is required")
        data = self._gql(_GET_ISSUE_DETAILS, {"id": item_id})
        node = data.get("issue")
        if not node:
            raise DecodeError(f"Issue '{item_id}' not found in Linear")
        try:
            return self._detail_from_node(node)
        except (KeyError, TypeError, ValidationError) as exc:
            raise DecodeError(f"Unexpected Linear response shape: {exc}") from exc
