"""Journal entries, tags and images

Revision ID: 5b2e0c7d91a4
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5b2e0c7d91a4"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "JournalEntries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("content", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("TIMEZONE('utc', statement_timestamp())"),
            nullable=False,
        ),
        sa.Column("modified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("entry_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_JournalEntries")),
    )
    op.create_index(
        op.f("ix_JournalEntries_entry_date"),
        "JournalEntries",
        ["entry_date"],
        unique=False,
    )
    op.create_index(
        op.f("ix_JournalEntries_user_id"), "JournalEntries", ["user_id"], unique=False
    )

    op.create_table(
        "Tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_Tags")),
        sa.UniqueConstraint("name", "user_id", name="uc_tags_name_user_id"),
    )
    op.create_index(op.f("ix_Tags_name"), "Tags", ["name"], unique=False)
    op.create_index(op.f("ix_Tags_user_id"), "Tags", ["user_id"], unique=False)

    op.create_table(
        "JournalEntryTag",
        sa.Column("journal_entry_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["journal_entry_id"],
            ["JournalEntries.id"],
            name="fk_journal_entry_tag_journal_entries_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["Tags.id"],
            name="fk_journal_entry_tag_tags_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "journal_entry_id", "tag_id", name=op.f("pk_JournalEntryTag")
        ),
    )
    op.create_index(
        op.f("ix_JournalEntryTag_tag_id"), "JournalEntryTag", ["tag_id"], unique=False
    )

    op.create_table(
        "JournalImages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("image_data", sa.LargeBinary(), nullable=False),
        sa.Column("content_type", sa.String(), nullable=False),
        sa.Column("caption", sa.String(), nullable=True),
        sa.Column("journal_entry_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["journal_entry_id"],
            ["JournalEntries.id"],
            name="fk_journal_images_journal_entries_id",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_JournalImages")),
    )
    op.create_index(
        op.f("ix_JournalImages_journal_entry_id"),
        "JournalImages",
        ["journal_entry_id"],
        unique=False,
    )


def downgrade():
    op.drop_index(op.f("ix_JournalImages_journal_entry_id"), table_name="JournalImages")
    op.drop_table("JournalImages")
    op.drop_index(op.f("ix_JournalEntryTag_tag_id"), table_name="JournalEntryTag")
    op.drop_table("JournalEntryTag")
    op.drop_index(op.f("ix_Tags_user_id"), table_name="Tags")
    op.drop_index(op.f("ix_Tags_name"), table_name="Tags")
    op.drop_table("Tags")
    op.drop_index(op.f("ix_JournalEntries_user_id"), table_name="JournalEntries")
    op.drop_index(op.f("ix_JournalEntries_entry_date"), table_name="JournalEntries")
    op.drop_table("JournalEntries")
