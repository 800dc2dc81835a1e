"""
SQLAlchemy models for journal entry related tables.
"""
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    MetaData,
    PrimaryKeyConstraint,
    String,
    UniqueConstraint,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import expression

"""
Naming conventions doc
https://docs.sqlalchemy.org/en/20/core/constraints.html#configuring-constraint-naming-conventions
"""
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class utcnow(expression.FunctionElement):
    type = DateTime(timezone=True)
    inherit_cache = True


@compiles(utcnow, "postgresql")
def pg_utcnow(element, compiler, **kwargs):
    return "TIMEZONE('utc', statement_timestamp())"


@compiles(utcnow, "sqlite")
def sqlite_utcnow(element, compiler, **kwargs):
    return "CURRENT_TIMESTAMP"


class JournalEntry(Base):  # type: ignore
    __tablename__ = "JournalEntries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    content = Column(String, nullable=False)
    created_at = Column(
        DateTime(timezone=True), server_default=utcnow(), nullable=False
    )
    modified_at = Column(DateTime(timezone=True), nullable=True)
    entry_date = Column(DateTime(timezone=True), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    tag_links = relationship(
        "JournalEntryTag",
        back_populates="journal_entry",
        cascade="all, delete",
        lazy=True,
    )
    images = relationship(
        "JournalImage",
        back_populates="journal_entry",
        cascade="all, delete",
        order_by="JournalImage.id",
        lazy=True,
    )


class Tag(Base):  # type: ignore
    __tablename__ = "Tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("name", "user_id", name="uc_tags_name_user_id"),
    )


class JournalEntryTag(Base):  # type: ignore
    """
    Association between an entry and a tag of the same owner.
    """

    __tablename__ = "JournalEntryTag"
    __table_args__ = (PrimaryKeyConstraint("journal_entry_id", "tag_id"),)

    journal_entry_id = Column(
        Integer,
        ForeignKey(
            "JournalEntries.id",
            name="fk_journal_entry_tag_journal_entries_id",
            ondelete="CASCADE",
        ),
        nullable=False,
    )
    tag_id = Column(
        Integer,
        ForeignKey("Tags.id", name="fk_journal_entry_tag_tags_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    journal_entry = relationship("JournalEntry", back_populates="tag_links")
    tag = relationship("Tag", lazy="joined")


class JournalImage(Base):  # type: ignore
    __tablename__ = "JournalImages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    image_data = Column(LargeBinary, nullable=False)
    content_type = Column(String, nullable=False)
    caption = Column(String, nullable=True)
    journal_entry_id = Column(
        Integer,
        ForeignKey(
            "JournalEntries.id",
            name="fk_journal_images_journal_entries_id",
            ondelete="CASCADE",
        ),
        nullable=False,
        index=True,
    )

    journal_entry = relationship("JournalEntry", back_populates="images")
