from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Actor:
    """Caller identity for one request.

    Resolved from the X-Actor-Id header by the require_actor dependency and
    passed explicitly to every service call that records who did what.
    The value is taken as given; there is no authentication.

        actor_id: HR user or candidate identifier
        role:     optional free-text role hint (hr|recruiter|candidate|...)
    """

    actor_id: str
    role: str | None = None

    def is_candidate(self) -> bool:
        return self.role == "candidate"
