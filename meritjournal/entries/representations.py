"""
Projections of stored journal entries to API responses.
"""
import base64
from datetime import datetime, timezone
from typing import List, Optional

from .data import JournalEntryResponse, JournalImageResponse, TagUsage
from .models import JournalEntry, JournalImage, Tag


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Some engines (SQLite) return naive timestamps, all stored timestamps are UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_entry_date(entry_date: datetime) -> datetime:
    """
    Day the entry pertains to, as midnight UTC. Naive values are taken as UTC.
    """
    entry_date_utc = as_utc(entry_date)
    return datetime(
        entry_date_utc.year,
        entry_date_utc.month,
        entry_date_utc.day,
        tzinfo=timezone.utc,
    )


def parse_image_to_response(image: JournalImage) -> JournalImageResponse:
    return JournalImageResponse(
        id=image.id,
        image_data_base64=base64.b64encode(image.image_data).decode("ascii"),
        content_type=image.content_type,
        caption=image.caption,
        journal_entry_id=image.journal_entry_id,
    )


def parse_entry_to_response(journal_entry: JournalEntry) -> JournalEntryResponse:
    """
    Expects tag links (with tags) and images of the entry to be loaded.
    """
    tags: List[str] = sorted(
        link.tag.name for link in journal_entry.tag_links if link.tag is not None
    )
    return JournalEntryResponse(
        id=journal_entry.id,
        title=journal_entry.title,
        content=journal_entry.content,
        created_at=as_utc(journal_entry.created_at),
        modified_at=as_utc(journal_entry.modified_at),
        entry_date=as_utc(journal_entry.entry_date),
        tags=tags,
        images=[parse_image_to_response(image) for image in journal_entry.images],
    )


def parse_tag_usage(tag: Tag, entries_count: int) -> TagUsage:
    return TagUsage(id=tag.id, name=tag.name, entries_count=entries_count)
