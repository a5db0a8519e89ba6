"""Create plates and the audit log tables.

Revision ID: 001_plates_and_audit_log
Revises:
Create Date: 2026-01-17

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001_plates_and_audit_log"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    op.create_table(
        "plates",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("registration", sa.String(450), nullable=True),
        sa.Column("letters", sa.String(450), nullable=True),
        sa.Column("numbers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("purchase_price", sa.Numeric(18, 2), nullable=False),
        sa.Column("sale_price", sa.Numeric(18, 2), nullable=False),
        sa.Column(
            "status",
            sa.String(16),
            nullable=False,
            server_default="ForSale",
        ),
        sa.Column("reserved_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sold_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("sold_price", sa.Numeric(18, 2), nullable=True),
        sa.Column("promo_code_used", sa.Text, nullable=True),
        sa.CheckConstraint(
            "status IN ('ForSale', 'Reserved', 'Sold')", name="ck_plates_status"
        ),
    )
    op.create_index("ix_plates_registration", "plates", ["registration"])
    op.create_index("ix_plates_letters", "plates", ["letters"])
    op.create_index("ix_plates_numbers", "plates", ["numbers"])
    op.create_index("ix_plates_status", "plates", ["status"])
    op.create_index("ix_plates_sale_price", "plates", ["sale_price"])
    op.create_index("ix_plates_status_sale_price", "plates", ["status", "sale_price"])

    op.create_table(
        "audit_log_events",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("plate_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("dedupe_key", sa.String(64), nullable=False),
        sa.UniqueConstraint("dedupe_key", name="uq_audit_log_events_dedupe_key"),
    )
    op.create_index("ix_audit_log_events_plate_id", "audit_log_events", ["plate_id"])
    op.create_index("ix_audit_log_events_timestamp", "audit_log_events", ["timestamp"])
    op.create_index(
        "ix_audit_log_events_plate_id_timestamp",
        "audit_log_events",
        ["plate_id", "timestamp"],
    )

    op.create_table(
        "audit_log_event_changes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "audit_log_event_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("audit_log_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("field_name", sa.String(128), nullable=False),
        sa.Column("old_value", sa.String(1024), nullable=True),
        sa.Column("new_value", sa.String(1024), nullable=True),
    )
    op.create_index(
        "ix_audit_log_event_changes_audit_log_event_id",
        "audit_log_event_changes",
        ["audit_log_event_id"],
    )


def downgrade() -> None:
    op.drop_table("audit_log_event_changes")
    op.drop_table("audit_log_events")
    op.drop_table("plates")
