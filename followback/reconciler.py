"""Computing the relationship diff between two resolved sides."""

from typing import Optional

from .models import Diagnostic, RelationshipReport
from .resolver import IdentifierSet

SAMPLE_SIZE = 5


def reconcile(followers: IdentifierSet, following: IdentifierSet) -> RelationshipReport:
    """Compare who follows the user with who the user follows.

    Both derived lists keep the order of ``following``. Membership checks are
    hash lookups, so the cost is linear in the size of both sides.

    Args:
        followers: Resolved followers side
        following: Resolved following side

    Returns:
        RelationshipReport where ``not_following_back`` is following minus
        followers and ``mutual_followers`` is their intersection
    """
    following_handles = following.handles()

    not_following_back = []
    mutual_followers = []
    for handle in following_handles:
        if handle in followers:
            mutual_followers.append(handle)
        else:
            not_following_back.append(handle)

    return RelationshipReport(
        followers=followers.handles(),
        following=following_handles,
        not_following_back=not_following_back,
        mutual_followers=mutual_followers,
    )


def detect_normalization_mismatch(report: RelationshipReport) -> Optional[Diagnostic]:
    """Flag a report where nobody the user follows follows them back.

    With a non-empty followers side that almost always means the two inputs
    were normalized differently (for example one side is display names). The
    report itself is left untouched.
    """
    if not report.followers or not report.following:
        return None
    if len(report.not_following_back) != len(report.following):
        return None

    return Diagnostic(
        code="normalization_mismatch",
        message=(
            "All following flagged as not following back. "
            "Likely normalization mismatch in inputs."
        ),
        samples={
            "following": report.following[:SAMPLE_SIZE],
            "followers": report.followers[:SAMPLE_SIZE],
        },
    )
