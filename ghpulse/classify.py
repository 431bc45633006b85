"""
Activity classification for GitHub Pulse Overview.

Partitions a repository's pull requests into three buckets within a
trailing window ending at a reference instant:

- merged: merged within the window
- opened or updated: created or updated within the window, still open
- closed: closed without merge within the window

A pull request lands in at most one bucket. Merged wins over closed,
and both win over opened or updated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable

from .github import PullRequestRecord
from .timefmt import parse_timestamp, utcnow


logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(days=7)

MERGED = "merged"
OPENED_OR_UPDATED = "opened or updated"
CLOSED = "closed"

# Nerd Font glyphs: merge, pull request, closed pull request
BUCKET_ICONS = {
    MERGED: "\ue727",
    OPENED_OR_UPDATED: "\uf407",
    CLOSED: "\uf48e",
}


@dataclass(frozen=True)
class ClassifiedEntry:
    """A pull request placed in a bucket, dated by the event that put it there."""
    title: str
    url: str
    number: int
    date: datetime


@dataclass
class Bucket:
    """One classification outcome and its entries, in input order."""
    label: str
    entries: list[ClassifiedEntry] = field(default_factory=list)

    @property
    def icon(self) -> str:
        return BUCKET_ICONS[self.label]

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class Activity:
    """Classified pull-request activity of one repository."""
    now: datetime
    merged: Bucket = field(default_factory=lambda: Bucket(MERGED))
    opened_or_updated: Bucket = field(default_factory=lambda: Bucket(OPENED_OR_UPDATED))
    closed: Bucket = field(default_factory=lambda: Bucket(CLOSED))
    # Numbers of pull requests carrying an unparseable timestamp
    invalid: list[int] = field(default_factory=list)

    @property
    def buckets(self) -> list[Bucket]:
        """Buckets in display order."""
        return [self.merged, self.opened_or_updated, self.closed]

    @property
    def is_empty(self) -> bool:
        return all(len(bucket) == 0 for bucket in self.buckets)


def _is_after(value: datetime | None, start: datetime) -> bool:
    return value is not None and value > start


def _parse_field(pr: PullRequestRecord, name: str, default: datetime | None = None) -> tuple[datetime | None, bool]:
    """Parse one timestamp field, returning (value, is_invalid)."""
    raw = getattr(pr, name)
    if not raw:
        return default, False
    value = parse_timestamp(raw)
    return value, value is None


def classify(
    records: Iterable[PullRequestRecord],
    now: datetime | None = None,
    window: timedelta = DEFAULT_WINDOW,
) -> Activity:
    """
    Bucket pull requests by their activity within the trailing window.

    Args:
        records: Pull requests of a single repository
        now: Reference instant (defaults to the current UTC time)
        window: Length of the trailing window (default 7 days)

    Returns:
        Activity with merged, opened_or_updated and closed buckets

    A missing created_at or updated_at counts as ``now``, so a record
    without timestamps reads as freshly touched. A timestamp that is
    present but unparseable never falls inside the window; such records
    are logged and listed in ``Activity.invalid``.
    """
    now = parse_timestamp(now) if now is not None else utcnow()
    window_start = now - window
    activity = Activity(now=now)

    for pr in records:
        created_at, bad_created = _parse_field(pr, "created_at", default=now)
        updated_at, bad_updated = _parse_field(pr, "updated_at", default=now)
        merged_at, bad_merged = _parse_field(pr, "merged_at")
        closed_at, bad_closed = _parse_field(pr, "closed_at")

        bad_fields = [
            name for name, bad in (
                ("created_at", bad_created),
                ("updated_at", bad_updated),
                ("merged_at", bad_merged),
                ("closed_at", bad_closed),
            ) if bad
        ]
        if bad_fields:
            logger.warning(
                "PR #%s has unparseable timestamp(s): %s",
                pr.number, ", ".join(bad_fields),
            )
            activity.invalid.append(pr.number)

        recently_touched = _is_after(created_at, window_start) or _is_after(updated_at, window_start)
        recently_merged = _is_after(merged_at, window_start)
        recently_closed = _is_after(closed_at, window_start)

        if recently_merged:
            activity.merged.entries.append(
                ClassifiedEntry(pr.title, pr.url, pr.number, merged_at)
            )
        elif recently_closed:
            activity.closed.entries.append(
                ClassifiedEntry(pr.title, pr.url, pr.number, closed_at)
            )
        elif recently_touched and not recently_closed and not recently_merged:
            latest = max(d for d in (created_at, updated_at) if d is not None)
            activity.opened_or_updated.entries.append(
                ClassifiedEntry(pr.title, pr.url, pr.number, latest)
            )

    return activity
