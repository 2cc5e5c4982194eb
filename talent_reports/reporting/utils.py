"""Score-range eligibility shared by the feedback engine."""
from typing import Optional


def score_in_range(
    score: float,
    min_score: Optional[float],
    max_score: Optional[float],
) -> bool:
    """Return True when ``score`` lies in the inclusive window [min_score, max_score].

    A ``None`` bound leaves that side of the window open, so an entry with
    both bounds unset accepts every score.

    Args:
        score: Dimension score to test.
        min_score: Lower bound (inclusive) or None.
        max_score: Upper bound (inclusive) or None.

    Returns:
        Whether the score is eligible.
    """
    if min_score is not None and score < min_score:
        return False
    if max_score is not None and score > max_score:
        return False
    return True
