"""Capability-based interface for activity sources."""

from abc import ABC

from dailyrecap.models import AggregatedActivity, CandidateItem, ItemDetail, TimeWindow


class ActivitySource(ABC):
    """An external service that reports what changed in a time window.

    Subclasses advertise what they can do through the `supports_*` flags and
    override only the matching methods. `required` decides whether a failure
    aborts the run or only degrades it.
    """

    name: str = ""
    supports_candidates: bool = False
    supports_detail: bool = False
    supports_aggregate: bool = False

    def __init__(self, required: bool = False) -> None:
        self.required = required

    # Not abstract: callers check the matching supports_* flag before calling.
    def list_candidates(self, window: TimeWindow) -> list[CandidateItem]:
        raise NotImplementedError(f"{self.name} does not list candidate items")

    def fetch_detail(self, item_id: str) -> ItemDetail:
        raise NotImplementedError(f"{self.name} does not provide item detail")

    def fetch_aggregate(self, window: TimeWindow) -> AggregatedActivity:
        raise NotImplementedError(f"{self.name} does not provide aggregate activity")


def graphql_error_message(errors: object) -> str:
    """First message of a GraphQL `errors` envelope."""
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and "message" in first:
            return str(first["message"])
        return str(first)
    return str(errors)
