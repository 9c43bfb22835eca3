"""initial yard movement tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


class GUID(sa.TypeDecorator):
    impl = sa.CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(sa.CHAR(36))


def upgrade() -> None:
    op.create_table(
        "trailers",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("trailer_number", sa.String(length=64), nullable=False),
        sa.Column("owner", sa.String(length=255), nullable=False),
        sa.Column("make", sa.String(length=120), nullable=False),
        sa.Column("model", sa.String(length=120), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("vin", sa.String(length=64), nullable=True),
        sa.Column("license_plate", sa.String(length=32), nullable=False),
        sa.Column("state_or_province", sa.String(length=32), nullable=False),
        sa.Column("trailer_type", sa.String(length=32), nullable=False),
        sa.Column("safety_inspection_expiry_date", sa.Date(), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=8), nullable=False, server_default="OUT"),
        sa.Column("yard_id", sa.String(length=32), nullable=True),
        sa.Column("load_state", sa.String(length=16), nullable=False, server_default="UNKNOWN"),
        sa.Column("condition", sa.String(length=32), nullable=False, server_default="ACTIVE"),
        sa.Column("last_move_io_ts", sa.DateTime(), nullable=True),
        sa.Column("total_movements", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("vin", name="uq_trailers_vin"),
    )
    op.create_index("ix_trailers_trailer_number", "trailers", ["trailer_number"], unique=True)
    op.create_index("ix_trailers_status", "trailers", ["status"], unique=False)
    op.create_index("ix_trailers_yard_id", "trailers", ["yard_id"], unique=False)

    op.create_table(
        "movements",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("request_id", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("trailer_id", GUID(), sa.ForeignKey("trailers.id"), nullable=False),
        sa.Column("yard_id", sa.String(length=32), nullable=True),
        sa.Column("ts", sa.DateTime(), nullable=False),
        sa.Column("actor", sa.JSON(), nullable=False),
        sa.Column("carrier", sa.JSON(), nullable=False),
        sa.Column("trip", sa.JSON(), nullable=False),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("angles", sa.JSON(), nullable=False),
        sa.Column("axles", sa.JSON(), nullable=False),
        sa.Column("damage_checklist", sa.JSON(), nullable=False),
        sa.Column("damages", sa.JSON(), nullable=False),
        sa.Column("ctpat", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("request_id", name="uq_movements_request_id"),
    )
    op.create_index("ix_movements_type", "movements", ["type"], unique=False)
    op.create_index("ix_movements_trailer_id", "movements", ["trailer_id"], unique=False)
    op.create_index("ix_movements_yard_id", "movements", ["yard_id"], unique=False)
    op.create_index("ix_movements_ts", "movements", ["ts"], unique=False)

    op.create_table(
        "yard_day_stats",
        sa.Column("id", GUID(), primary_key=True),
        sa.Column("yard_id", sa.String(length=32), nullable=False),
        sa.Column("day_key", sa.String(length=10), nullable=False),
        sa.Column("tz", sa.String(length=64), nullable=False),
        sa.Column("day_start_utc", sa.DateTime(), nullable=False),
        sa.Column("in_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("out_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inspection_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("damage_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("yard_id", "day_key", name="uq_yard_day_stats_yard_day"),
    )
    op.create_index("ix_yard_day_stats_yard_id", "yard_day_stats", ["yard_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_yard_day_stats_yard_id", table_name="yard_day_stats")
    op.drop_table("yard_day_stats")
    op.drop_index("ix_movements_ts", table_name="movements")
    op.drop_index("ix_movements_yard_id", table_name="movements")
    op.drop_index("ix_movements_trailer_id", table_name="movements")
    op.drop_index("ix_movements_type", table_name="movements")
    op.drop_table("movements")
    op.drop_index("ix_trailers_yard_id", table_name="trailers")
    op.drop_index("ix_trailers_status", table_name="trailers")
    op.drop_index("ix_trailers_trailer_number", table_name="trailers")
    op.drop_table("trailers")
