"""Date poll tallying."""

from __future__ import annotations

from collections import Counter
from typing import Any

from chill.errors import ValidationError


def tally_votes(candidate_dates: dict[str, Any] | None, selections: dict[str, Any] | None) -> int:
    """Pick the winning timestamp of a date poll.

    Only votes for proposed candidates count. The most voted candidate wins,
    ties go to the earliest date, and with no votes at all the earliest
    candidate is chosen.
    """
    candidates = sorted(int(ts) for ts in (candidate_dates or {}) if str(ts).isdigit())
    if not candidates:
        raise ValidationError("The poll has no candidate dates.")

    allowed = set(candidates)
    votes: Counter[int] = Counter()
    for chosen in (selections or {}).values():
        for ts in set(chosen or []):
            if isinstance(ts, (int, float)) and int(ts) in allowed:
                votes[int(ts)] += 1

    return min(candidates, key=lambda ts: (-votes[ts], ts))
