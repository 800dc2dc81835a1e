"""
Journal entry related actions in Merit Journal
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from .data import (
    CreateJournalEntryRequest,
    JournalEntryResponse,
    TagUsage,
    UpdateJournalEntryRequest,
)
from .models import JournalEntry, JournalImage
from .reconcile import reconcile_entry_images, reconcile_entry_tags
from .repositories import UnitOfWork
from .representations import (
    normalize_entry_date,
    parse_entry_to_response,
    parse_tag_usage,
)

logger = logging.getLogger(__name__)


class EntryNotFound(Exception):
    """
    Raised on actions that involve journal entries which are not present in the database
    or which belong to another user.
    """


class InvalidEntryParameters(ValueError):
    """
    Raised when an entry is created or updated with missing or blank fields.
    """


def _validate_entry_request(
    entry_request: CreateJournalEntryRequest,
) -> None:
    if not entry_request.user_id:
        raise InvalidEntryParameters("Entry owner must be specified")
    if entry_request.title is None or entry_request.title.strip() == "":
        raise InvalidEntryParameters("Entry title must not be blank")
    if entry_request.content is None:
        raise InvalidEntryParameters("Entry content must be specified")
    if entry_request.entry_date is None:
        raise InvalidEntryParameters("Entry date must be specified")


async def _load_entry_response(
    unit_of_work: UnitOfWork, entry_id: int, user_id: str
) -> JournalEntryResponse:
    journal_entry = unit_of_work.journal_entries.get_with_relations(entry_id, user_id)
    if journal_entry is None:
        raise EntryNotFound(f"Could not find the journal entry with id: {entry_id}")
    return parse_entry_to_response(journal_entry)


async def create_journal_entry(
    unit_of_work: UnitOfWork,
    entry_request: CreateJournalEntryRequest,
) -> JournalEntryResponse:
    """
    Creates an entry together with its tags and images in one transaction and returns
    the stored state of the new entry.
    """
    _validate_entry_request(entry_request)

    unit_of_work.begin()
    try:
        journal_entry = unit_of_work.journal_entries.add(
            JournalEntry(
                title=entry_request.title,
                content=entry_request.content,
                created_at=datetime.now(timezone.utc),
                modified_at=None,
                entry_date=normalize_entry_date(entry_request.entry_date),
                user_id=entry_request.user_id,
            )
        )
        unit_of_work.flush()
        entry_id = journal_entry.id

        await reconcile_entry_tags(
            unit_of_work, entry_id, entry_request.user_id, entry_request.tags
        )
        await reconcile_entry_images(unit_of_work, entry_id, entry_request.images)

        unit_of_work.commit()
    except (Exception, asyncio.CancelledError):
        logger.warning(
            f"Rolling back creation of journal entry for user {entry_request.user_id}"
        )
        if unit_of_work.in_transaction:
            unit_of_work.rollback()
        raise

    logger.info(f"Created journal entry {entry_id} for user {entry_request.user_id}")
    return await _load_entry_response(unit_of_work, entry_id, entry_request.user_id)


async def update_journal_entry(
    unit_of_work: UnitOfWork,
    entry_id: int,
    entry_request: UpdateJournalEntryRequest,
) -> JournalEntryResponse:
    """
    Overrides scalar fields of an entry and reconciles its tags and images. Raises
    EntryNotFound if the entry does not exist for the user.
    """
    _validate_entry_request(entry_request)

    unit_of_work.begin()
    try:
        journal_entry = unit_of_work.journal_entries.get_for_user(
            entry_id, entry_request.user_id
        )
        if journal_entry is None:
            raise EntryNotFound(
                f"Could not find the journal entry with id: {entry_id}"
            )

        journal_entry.title = entry_request.title
        journal_entry.content = entry_request.content
        journal_entry.entry_date = normalize_entry_date(entry_request.entry_date)
        journal_entry.modified_at = datetime.now(timezone.utc)
        unit_of_work.flush()

        await reconcile_entry_tags(
            unit_of_work, entry_id, entry_request.user_id, entry_request.tags
        )
        await reconcile_entry_images(unit_of_work, entry_id, entry_request.images)

        unit_of_work.commit()
    except (Exception, asyncio.CancelledError):
        if unit_of_work.in_transaction:
            unit_of_work.rollback()
        raise

    return await _load_entry_response(unit_of_work, entry_id, entry_request.user_id)


async def delete_journal_entry(
    unit_of_work: UnitOfWork, entry_id: int, user_id: str
) -> None:
    """
    Deletes an entry with its tag links and images. Tags themselves are kept.
    """
    unit_of_work.begin()
    try:
        journal_entry = unit_of_work.journal_entries.get_for_user(entry_id, user_id)
        if journal_entry is None:
            raise EntryNotFound(
                f"Could not find the journal entry with id: {entry_id}"
            )

        for entry_tag in unit_of_work.journal_entry_tags.list_for_entry(entry_id):
            unit_of_work.journal_entry_tags.remove(entry_tag)
        for image in unit_of_work.journal_images.list_for_entry(entry_id):
            unit_of_work.journal_images.remove(image)
        unit_of_work.flush()

        unit_of_work.journal_entries.remove(journal_entry)
        unit_of_work.commit()
    except (Exception, asyncio.CancelledError):
        if unit_of_work.in_transaction:
            unit_of_work.rollback()
        raise

    logger.info(f"Deleted journal entry {entry_id} of user {user_id}")


async def get_journal_entries(
    unit_of_work: UnitOfWork, user_id: str, tag: Optional[str] = None
) -> List[JournalEntryResponse]:
    """
    Returns entries of the user, latest entry date first. If tag is given, only entries
    carrying exactly that tag are returned.
    """
    tag_name: Optional[str] = None
    if tag is not None:
        tag_name = tag.strip()
        if not tag_name:
            return []

    journal_entries = unit_of_work.journal_entries.list_with_relations(
        user_id, tag_name=tag_name
    )
    return [parse_entry_to_response(journal_entry) for journal_entry in journal_entries]


async def get_journal_entry(
    unit_of_work: UnitOfWork, entry_id: int, user_id: str
) -> Optional[JournalEntryResponse]:
    """
    Returns the entry of the user or None, also when the entry belongs to someone else.
    """
    journal_entry = unit_of_work.journal_entries.get_with_relations(entry_id, user_id)
    if journal_entry is None:
        return None
    return parse_entry_to_response(journal_entry)


async def get_journal_image(
    unit_of_work: UnitOfWork, entry_id: int, image_id: int, user_id: str
) -> Optional[JournalImage]:
    return unit_of_work.journal_images.get_for_user(entry_id, image_id, user_id)


async def get_tags(unit_of_work: UnitOfWork, user_id: str) -> List[TagUsage]:
    """
    Returns tags of the user with the number of entries carrying each of them.
    """
    return [
        parse_tag_usage(tag, entries_count)
        for tag, entries_count in unit_of_work.tags.list_usage(user_id)
    ]
