"""Moderation statistics.

Stats are recomputed from a full scan on every call. There are no cached or
incremental counters: moderation volume is small and stale numbers would be
worse than a full recompute.

Store errors propagate unchanged; this module adds no failure modes.
"""

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from wishwall.db.models import Message, ModerationStatus
from wishwall.schemas.moderation import ModerationStats
from wishwall.services.moderation import attachment_counts

StatsRow = tuple[ModerationStatus, str | None, int]


def tally_stats(rows: Iterable[StatsRow]) -> ModerationStats:
    """Single pass over (status, country, attachment_count) rows.

    Each row lands in exactly one of approved / rejected / pending, so
    total == approved + pending + rejected. Countries are counted as distinct
    non-null values, compared exactly (case-sensitive).
    """
    approved = pending = rejected = with_media = 0
    countries: set[str] = set()

    for status, country, media_count in rows:
        if status is ModerationStatus.approved:
            approved += 1
        elif status is ModerationStatus.rejected:
            rejected += 1
        else:
            pending += 1

        if media_count > 0:
            with_media += 1

        if country is not None:
            countries.add(country)

    return ModerationStats(
        total=approved + pending + rejected,
        approved=approved,
        pending=pending,
        rejected=rejected,
        with_media=with_media,
        countries=len(countries),
    )


def compute_stats(db: Session) -> ModerationStats:
    """Compute moderation stats from one query over all messages."""
    counts = attachment_counts()
    query = select(
        Message.moderation_status,
        Message.location_country,
        func.coalesce(counts.c.media_count, 0),
    ).outerjoin(counts, counts.c.message_id == Message.id)

    return tally_stats(
        (status, country, int(media_count))
        for status, country, media_count in db.execute(query).all()
    )
