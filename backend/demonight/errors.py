from __future__ import annotations
from typing import Any


class DemoNightError(Exception):
    """Base for domain failures. Routers turn these into HTTP errors."""
    status_code = 400
    code = "error"

    def __init__(self, message: str, **fields: Any):
        super().__init__(message)
        self.message = message
        self.fields = fields

    def detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.fields}


# ---------- validation ----------

class VoteValidationError(DemoNightError):
    status_code = 422
    code = "invalid_vote"

    def __init__(self, message: str, *, field: str):
        super().__init__(message, field=field)
        self.field = field


class MatchValidationError(DemoNightError):
    status_code = 422
    code = "invalid_match"

    def __init__(self, message: str, *, field: str):
        super().__init__(message, field=field)
        self.field = field


class BudgetExceeded(DemoNightError):
    status_code = 422
    code = "budget_exceeded"

    def __init__(self, *, remaining: int, requested: int, cap: int):
        super().__init__(
            f"Total investment cannot exceed ${cap:,}. You have ${remaining // 1000}k remaining.",
            remaining=remaining,
            requested=requested,
            cap=cap,
        )
        self.remaining = remaining
        self.requested = requested
        self.cap = cap


# ---------- conflicts ----------

class DuplicateVote(DemoNightError):
    status_code = 409
    code = "duplicate_vote"

    def __init__(self, message: str = "Cannot vote for the same award twice, please try again"):
        super().__init__(message, retryable=True)


class InvalidMatchTransition(DemoNightError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, match_id, current: str, action: str):
        super().__init__(f"Cannot {action} a match that is {current}", match_id=str(match_id), status=current)
        self.current = current


class MatchNotOpen(DemoNightError):
    status_code = 409
    code = "match_not_open"

    def __init__(self, match_id, current: str):
        super().__init__("Voting is not open for this match", match_id=str(match_id), status=current)


class ActiveMatchConflict(DemoNightError):
    status_code = 409
    code = "active_match_exists"

    def __init__(self, event_id: str, active_match_id=None):
        super().__init__(
            "Another match is already active for this event",
            event_id=event_id,
            active_match_id=str(active_match_id) if active_match_id else None,
        )


# ---------- not found ----------

class NotFound(DemoNightError):
    status_code = 404
    code = "not_found"


class MatchNotFound(NotFound):
    code = "match_not_found"

    def __init__(self, match_id):
        super().__init__("Match not found", match_id=str(match_id))


class DemoNotFound(NotFound):
    code = "demo_not_found"

    def __init__(self, demo_id):
        super().__init__("Demo not found", demo_id=str(demo_id))


class VoteNotFound(NotFound):
    code = "vote_not_found"

    def __init__(self, vote_id):
        super().__init__("Vote not found", vote_id=str(vote_id))


class EventNotFound(NotFound):
    code = "event_not_found"

    def __init__(self, event_id: str):
        super().__init__("Event not found", event_id=event_id)


class NoCurrentEvent(NotFound):
    code = "no_current_event"

    def __init__(self):
        super().__init__("No current event")


class AttendeeNotFound(NotFound):
    code = "attendee_not_found"

    def __init__(self, attendee_id: str):
        super().__init__("Attendee not found", attendee_id=attendee_id)


class AwardNotFound(NotFound):
    code = "award_not_found"

    def __init__(self, award_id):
        super().__init__("Award not found", award_id=str(award_id))
