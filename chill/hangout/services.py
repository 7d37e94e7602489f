"""Service layer for hangout operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chill.core import constants as c
from chill.errors import NotFoundError, ValidationError
from chill.store.paths import generate_key
from chill.utils import now_ms

from .polls import tally_votes

if TYPE_CHECKING:
    from chill.core.types import Hangout
    from chill.store import GuardedStore


def _hangout_path(hangout_id: str, *parts: str) -> str:
    return "/".join(("", c.HANGOUTS, hangout_id, *parts))


class HangoutService:
    """Handles hangout creation, RSVPs, and date polls."""

    @staticmethod
    def create_hangout(
        gateway: GuardedStore,
        uid: str,
        group_id: str,
        name: str,
        time: int | None = None,
        candidate_dates: list[int] | None = None,
        created_anonymously: bool = False,
        **details: Any,
    ) -> str:
        """Create a hangout and list it under its group in one update.

        Pass either a fixed ``time`` or ``candidate_dates`` to open a date
        poll. ``details`` may carry ``location``, ``info``, ``minAttendees``
        and ``maxAttendees``.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("A hangout needs a name.")
        if time is not None and candidate_dates:
            raise ValidationError("Choose a time or open a date poll, not both.")

        hangout: Hangout = {
            "name": name,
            "createdAt": now_ms(),
            "group": group_id,
            "createdBy": uid,
            "createdAnonymously": created_anonymously,
        }
        if time is not None:
            hangout["time"] = int(time)
        if candidate_dates:
            hangout["datetimePollInProgress"] = True
            hangout["candidateDates"] = {str(int(ts)): uid for ts in candidate_dates}
        hangout.update({k: v for k, v in details.items() if v is not None})  # type: ignore[typeddict-item]

        hangout_id = generate_key()
        gateway.update(
            uid,
            "/",
            {
                f"{c.HANGOUTS}/{hangout_id}": hangout,
                f"{c.GROUPS}/{group_id}/{c.GROUP_HANGOUTS}/{hangout_id}": True,
            },
        )
        return hangout_id

    @staticmethod
    def get_hangout(gateway: GuardedStore, uid: str, hangout_id: str) -> dict[str, Any]:
        """Fetch a hangout the caller's group can see."""
        hangout = gateway.read(uid, _hangout_path(hangout_id))
        if hangout is None:
            raise NotFoundError("Hangout not found.")
        hangout["id"] = hangout_id
        return hangout

    @staticmethod
    def update_hangout(
        gateway: GuardedStore, uid: str, hangout_id: str, **fields: Any
    ) -> None:
        """Change mutable fields; ``None`` clears a field."""
        if not fields:
            raise ValidationError("Nothing to update.")
        gateway.update(uid, _hangout_path(hangout_id), fields)

    @staticmethod
    def delete_hangout(gateway: GuardedStore, uid: str, hangout_id: str) -> None:
        """Delete a hangout together with its entry on the group."""
        hangout = HangoutService.get_hangout(gateway, uid, hangout_id)
        gateway.update(
            uid,
            "/",
            {
                f"{c.GROUPS}/{hangout['group']}/{c.GROUP_HANGOUTS}/{hangout_id}": None,
                f"{c.HANGOUTS}/{hangout_id}": None,
            },
        )

    @staticmethod
    def rsvp(gateway: GuardedStore, uid: str, hangout_id: str) -> None:
        """Mark the caller as attending."""
        gateway.set(uid, _hangout_path(hangout_id, c.HANGOUT_ATTENDEES, uid), True)

    @staticmethod
    def decline(gateway: GuardedStore, uid: str, hangout_id: str) -> None:
        """Withdraw the caller's attendance."""
        gateway.delete(uid, _hangout_path(hangout_id, c.HANGOUT_ATTENDEES, uid))

    @staticmethod
    def propose_date(gateway: GuardedStore, uid: str, hangout_id: str, timestamp: int) -> None:
        """Add a candidate date to a running poll."""
        gateway.set(
            uid,
            _hangout_path(hangout_id, c.HANGOUT_CANDIDATE_DATES, str(int(timestamp))),
            uid,
        )

    @staticmethod
    def vote(gateway: GuardedStore, uid: str, hangout_id: str, timestamps: list[int]) -> None:
        """Replace the caller's poll selections; an empty list clears them."""
        selections = sorted({int(ts) for ts in timestamps})
        gateway.set(
            uid,
            _hangout_path(hangout_id, c.HANGOUT_POLL_SELECTIONS, uid),
            selections or None,
        )

    @staticmethod
    def close_poll(gateway: GuardedStore, uid: str, hangout_id: str) -> int:
        """Fix the hangout's time to the poll winner and end the poll."""
        hangout = HangoutService.get_hangout(gateway, uid, hangout_id)
        if not hangout.get(c.HANGOUT_POLL_IN_PROGRESS):
            raise ValidationError("This hangout has no date poll running.")
        winner = tally_votes(
            hangout.get(c.HANGOUT_CANDIDATE_DATES),
            hangout.get(c.HANGOUT_POLL_SELECTIONS),
        )
        gateway.update(
            uid,
            _hangout_path(hangout_id),
            {c.HANGOUT_TIME: winner, c.HANGOUT_POLL_IN_PROGRESS: None},
        )
        return winner
