"""
Per-entity repositories and the unit of work sharing one database session between them.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from .models import JournalEntry, JournalEntryTag, JournalImage, Tag

logger = logging.getLogger(__name__)


class TransactionAlreadyInProgress(Exception):
    """
    Raised when a transaction is started on a unit of work which already has an active one.
    """


class NoTransactionInProgress(Exception):
    """
    Raised on commit or rollback of a unit of work without an active transaction.
    """


class JournalEntryRepository:
    def __init__(self, db_session: Session) -> None:
        self.db_session = db_session

    def add(self, journal_entry: JournalEntry) -> JournalEntry:
        self.db_session.add(journal_entry)
        return journal_entry

    def remove(self, journal_entry: JournalEntry) -> None:
        self.db_session.delete(journal_entry)

    def get_for_user(self, entry_id: int, user_id: str) -> Optional[JournalEntry]:
        """
        Entries of other users are reported exactly like absent ones.
        """
        return (
            self.db_session.query(JournalEntry)
            .filter(JournalEntry.id == entry_id)
            .filter(JournalEntry.user_id == user_id)
            .one_or_none()
        )

    def get_with_relations(
        self, entry_id: int, user_id: str
    ) -> Optional[JournalEntry]:
        return (
            self.db_session.query(JournalEntry)
            .options(
                selectinload(JournalEntry.tag_links).selectinload(JournalEntryTag.tag),
                selectinload(JournalEntry.images),
            )
            .filter(JournalEntry.id == entry_id)
            .filter(JournalEntry.user_id == user_id)
            .populate_existing()
            .one_or_none()
        )

    def list_with_relations(
        self, user_id: str, tag_name: Optional[str] = None
    ) -> List[JournalEntry]:
        query = (
            self.db_session.query(JournalEntry)
            .options(
                selectinload(JournalEntry.tag_links).selectinload(JournalEntryTag.tag),
                selectinload(JournalEntry.images),
            )
            .filter(JournalEntry.user_id == user_id)
        )
        if tag_name is not None:
            query = query.filter(
                JournalEntry.tag_links.any(
                    JournalEntryTag.tag.has(
                        (Tag.name == tag_name) & (Tag.user_id == user_id)
                    )
                )
            )
        query = query.order_by(JournalEntry.entry_date.desc(), JournalEntry.id.desc())
        return query.populate_existing().all()


class TagRepository:
    def __init__(self, db_session: Session) -> None:
        self.db_session = db_session

    def add(self, tag: Tag) -> Tag:
        self.db_session.add(tag)
        return tag

    def find_by_name(self, name: str, user_id: str) -> Optional[Tag]:
        return (
            self.db_session.query(Tag)
            .filter(Tag.name == name)
            .filter(Tag.user_id == user_id)
            .one_or_none()
        )

    def list_usage(self, user_id: str) -> List[tuple]:
        """
        Returns (tag, number of linked entries) pairs ordered by tag name.
        """
        entries_count = func.count(JournalEntryTag.journal_entry_id).label(
            "entries_count"
        )
        query = (
            self.db_session.query(Tag, entries_count)
            .outerjoin(JournalEntryTag, JournalEntryTag.tag_id == Tag.id)
            .filter(Tag.user_id == user_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return query.all()


class JournalEntryTagRepository:
    def __init__(self, db_session: Session) -> None:
        self.db_session = db_session

    def add(self, entry_tag: JournalEntryTag) -> JournalEntryTag:
        self.db_session.add(entry_tag)
        return entry_tag

    def remove(self, entry_tag: JournalEntryTag) -> None:
        self.db_session.delete(entry_tag)

    def list_for_entry(self, journal_entry_id: int) -> List[JournalEntryTag]:
        return (
            self.db_session.query(JournalEntryTag)
            .filter(JournalEntryTag.journal_entry_id == journal_entry_id)
            .all()
        )


class JournalImageRepository:
    def __init__(self, db_session: Session) -> None:
        self.db_session = db_session

    def add(self, image: JournalImage) -> JournalImage:
        self.db_session.add(image)
        return image

    def remove(self, image: JournalImage) -> None:
        self.db_session.delete(image)

    def list_for_entry(self, journal_entry_id: int) -> List[JournalImage]:
        return (
            self.db_session.query(JournalImage)
            .filter(JournalImage.journal_entry_id == journal_entry_id)
            .order_by(JournalImage.id)
            .all()
        )

    def get_for_user(
        self, journal_entry_id: int, image_id: int, user_id: str
    ) -> Optional[JournalImage]:
        return (
            self.db_session.query(JournalImage)
            .join(JournalEntry, JournalEntry.id == JournalImage.journal_entry_id)
            .filter(JournalImage.id == image_id)
            .filter(JournalImage.journal_entry_id == journal_entry_id)
            .filter(JournalEntry.user_id == user_id)
            .one_or_none()
        )


class UnitOfWork:
    """
    Groups the repositories of one request around a single session and owns the
    transaction boundary. Only command actions begin, commit or roll back.
    """

    def __init__(self, db_session: Session) -> None:
        self.db_session = db_session
        self.journal_entries = JournalEntryRepository(db_session)
        self.tags = TagRepository(db_session)
        self.journal_entry_tags = JournalEntryTagRepository(db_session)
        self.journal_images = JournalImageRepository(db_session)
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    def begin(self) -> None:
        if self._in_transaction:
            raise TransactionAlreadyInProgress("A transaction is already in progress")
        self._in_transaction = True

    def flush(self) -> None:
        self.db_session.flush()

    def commit(self) -> None:
        if not self._in_transaction:
            raise NoTransactionInProgress("There is no transaction to commit")
        try:
            self.db_session.commit()
        except Exception:
            self.db_session.rollback()
            raise
        finally:
            self._in_transaction = False

    def rollback(self) -> None:
        if not self._in_transaction:
            raise NoTransactionInProgress("There is no transaction to roll back")
        try:
            self.db_session.rollback()
        finally:
            self._in_transaction = False
