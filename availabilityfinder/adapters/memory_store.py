"""
In-memory calendar store with fixed busy times.
"""

from typing import Dict, Iterable, List, Mapping

from ..domain.models import TimeRange


class InMemoryCalendarStore:
    """
    Calendar store backed by a plain mapping of identity -> busy ranges.

    Used by tests and by callers that already hold busy times. Identities
    are matched case-insensitively; unknown identities have no busy time.
    """

    def __init__(self, busy_by_identity: Mapping[str, Iterable[TimeRange]] | None = None):
        self._busy: Dict[str, List[TimeRange]] = {
            identity.lower(): list(ranges)
            for identity, ranges in (busy_by_identity or {}).items()
        }

    def fetch_busy_intervals(self, identity: str) -> List[TimeRange]:
        """Return a copy of the busy ranges stored for the identity."""
        return list(self._busy.get(identity.lower(), []))
