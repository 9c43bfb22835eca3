import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import CHAR, TypeDecorator

from app.yardgate.core.enums import TrailerCondition, TrailerLoadState, TrailerStatus


class GUID(TypeDecorator):
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID

            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class Base(DeclarativeBase):
    pass


class Trailer(Base):
    __tablename__ = "trailers"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    trailer_number: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    owner: Mapped[str] = mapped_column(String(255), nullable=False)
    make: Mapped[str] = mapped_column(String(120), nullable=False)
    model: Mapped[str] = mapped_column(String(120), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    vin: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    license_plate: Mapped[str] = mapped_column(String(32), nullable=False)
    state_or_province: Mapped[str] = mapped_column(String(32), nullable=False)
    trailer_type: Mapped[str] = mapped_column(String(32), nullable=False)
    safety_inspection_expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(8), nullable=False, default=TrailerStatus.OUT.value, index=True)
    yard_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    load_state: Mapped[str] = mapped_column(String(16), nullable=False, default=TrailerLoadState.UNKNOWN.value)
    condition: Mapped[str] = mapped_column(String(32), nullable=False, default=TrailerCondition.ACTIVE.value)
    last_move_io_ts: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    total_movements: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Movement(Base):
    __tablename__ = "movements"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    request_id: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    trailer_id: Mapped[uuid.UUID] = mapped_column(GUID(), ForeignKey("trailers.id"), index=True, nullable=False)
    yard_id: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    ts: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    actor: Mapped[dict] = mapped_column(JSON, nullable=False)
    carrier: Mapped[dict] = mapped_column(JSON, nullable=False)
    trip: Mapped[dict] = mapped_column(JSON, nullable=False)
    documents: Mapped[list] = mapped_column(JSON, nullable=False)
    angles: Mapped[dict] = mapped_column(JSON, nullable=False)
    axles: Mapped[list] = mapped_column(JSON, nullable=False)
    damage_checklist: Mapped[dict] = mapped_column(JSON, nullable=False)
    damages: Mapped[list] = mapped_column(JSON, nullable=False)
    ctpat: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class YardDayStat(Base):
    __tablename__ = "yard_day_stats"
    __table_args__ = (UniqueConstraint("yard_id", "day_key", name="uq_yard_day_stats_yard_day"),)

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    yard_id: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    day_key: Mapped[str] = mapped_column(String(10), nullable=False)
    tz: Mapped[str] = mapped_column(String(64), nullable=False)
    day_start_utc: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    in_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    out_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inspection_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    damage_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )
