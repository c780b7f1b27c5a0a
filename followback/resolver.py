"""Collapsing repeated mentions of a handle into one entry per handle."""

from typing import Dict, Iterable, Iterator, List, Optional

from .models import RawCandidate, Timestamp
from .normalizer import DEFAULT_DOMAIN, normalize_handle


def _rank(timestamp: Optional[Timestamp]) -> float:
    # A missing timestamp sorts below every real one, zero included
    return float("-inf") if timestamp is None else timestamp


class IdentifierSet:
    """Handles of one side mapped to their best known timestamp.

    Iteration and ``handles()`` follow first-insertion order.
    """

    def __init__(self):
        self._entries: Dict[str, Optional[Timestamp]] = {}

    def upsert(self, handle: str, timestamp: Optional[Timestamp] = None) -> bool:
        """Insert a handle or refresh its timestamp.

        An existing entry is replaced when the new timestamp is greater than
        or equal to the stored one, so on a tie the later mention wins.

        Returns:
            True if the stored value was written
        """
        if handle in self._entries and _rank(timestamp) < _rank(self._entries[handle]):
            return False
        self._entries[handle] = timestamp
        return True

    def timestamp_for(self, handle: str) -> Optional[Timestamp]:
        """Best known timestamp for a handle, None if absent or never timestamped."""
        return self._entries.get(handle)

    def handles(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, handle: object) -> bool:
        return handle in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"IdentifierSet({len(self._entries)} handles)"


def resolve(
    candidates: Iterable[RawCandidate],
    domain: str = DEFAULT_DOMAIN,
) -> IdentifierSet:
    """Normalize candidates and fold them into an IdentifierSet.

    Candidates that normalize to nothing are dropped. This is how an export's
    history of add/remove entries collapses to current membership: the last
    mention carrying a real timestamp wins.

    Args:
        candidates: Extracted candidates in document order
        domain: Platform domain used for normalization

    Returns:
        A fresh IdentifierSet
    """
    identifiers = IdentifierSet()
    for candidate in candidates:
        handle = normalize_handle(candidate.value, domain)
        if handle:
            identifiers.upsert(handle, candidate.timestamp)
    return identifiers
