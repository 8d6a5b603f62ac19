"""create availability and blocked_slot

Revision ID: 3c1f0a9b7d21
Revises:
Create Date: 2026-10-18 13:05:12.482113
"""
from alembic import op
import sqlalchemy as sa

revision = "3c1f0a9b7d21"
down_revision = None
branch_labels = None
depends_on = None


IX_AVAILABILITY_USER = "ix_availability_user_id"
IX_BLOCKED_SLOT_BLOCKER = "ix_blocked_slot_blocker_id"
IX_BLOCKED_SLOT_BLOCKEE = "ix_blocked_slot_blockee_id"


def upgrade():
    op.create_table(
        "availability",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("availability", schema=None) as batch_op:
        batch_op.create_index(IX_AVAILABILITY_USER, ["user_id"], unique=False)

    # Availability FKs are plain references: no ON DELETE CASCADE to the mirror
    op.create_table(
        "blocked_slot",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("blocker_id", sa.Integer(), nullable=False),
        sa.Column("blockee_id", sa.Integer(), nullable=False),
        sa.Column("blocker_availability_id", sa.Integer(), nullable=False),
        sa.Column("blockee_availability_id", sa.Integer(), nullable=False),
        sa.Column("blocked_start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("blocked_end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("description", sa.String(length=1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["blocker_availability_id"], ["availability.id"]),
        sa.ForeignKeyConstraint(["blockee_availability_id"], ["availability.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("blocked_slot", schema=None) as batch_op:
        batch_op.create_index(IX_BLOCKED_SLOT_BLOCKER, ["blocker_id"], unique=False)
        batch_op.create_index(IX_BLOCKED_SLOT_BLOCKEE, ["blockee_id"], unique=False)


def downgrade():
    with op.batch_alter_table("blocked_slot", schema=None) as batch_op:
        batch_op.drop_index(IX_BLOCKED_SLOT_BLOCKEE)
        batch_op.drop_index(IX_BLOCKED_SLOT_BLOCKER)
    op.drop_table("blocked_slot")

    with op.batch_alter_table("availability", schema=None) as batch_op:
        batch_op.drop_index(IX_AVAILABILITY_USER)
    op.drop_table("availability")
