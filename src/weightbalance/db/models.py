"""SQLAlchemy ORM models for all persistent tables."""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


def _measure():
    # Weights and indexes come back as floats; the Decimal round trip is not needed.
    return Numeric(12, 3, asdecimal=False)


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    provider: Mapped[str] = mapped_column(String(32), default="local")
    provider_sub: Mapped[str] = mapped_column(String(256), default="")
    email: Mapped[str] = mapped_column(String(256), default="")
    display_name: Mapped[str] = mapped_column(String(256), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )


class FlightRecordRow(Base):
    __tablename__ = "flight_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    loading_index_doc: Mapped[str] = mapped_column(String(64), unique=True)
    weight_report_doc: Mapped[str] = mapped_column(String(64))
    report_date: Mapped[date] = mapped_column(Date)
    aircraft_reg: Mapped[str | None] = mapped_column(String(32), nullable=True)
    empty_weight: Mapped[float] = mapped_column(_measure())
    empty_weight_index: Mapped[float] = mapped_column(_measure())
    dow_domestic: Mapped[float] = mapped_column(_measure())
    doi_domestic: Mapped[float] = mapped_column(_measure())
    dow_international: Mapped[float] = mapped_column(_measure())
    doi_international: Mapped[float] = mapped_column(_measure())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    galley_details: Mapped[list[GalleyDetailRow]] = relationship(
        back_populates="flight_record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="GalleyDetailRow.id",
    )
    crew_details: Mapped[list[CrewDetailRow]] = relationship(
        back_populates="flight_record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CrewDetailRow.id",
    )


class GalleyDetailRow(Base):
    __tablename__ = "galley_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_record_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("flight_records.id", ondelete="CASCADE"), index=True
    )
    galley_no: Mapped[str] = mapped_column(String(32))
    arm_m: Mapped[float] = mapped_column(_measure())
    domestic_weight_kg: Mapped[float] = mapped_column(_measure())
    domestic_index: Mapped[float] = mapped_column(_measure())
    international_weight_kg: Mapped[float] = mapped_column(_measure())
    international_index: Mapped[float] = mapped_column(_measure())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    flight_record: Mapped[FlightRecordRow] = relationship(back_populates="galley_details")


class CrewDetailRow(Base):
    __tablename__ = "crew_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_record_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("flight_records.id", ondelete="CASCADE"), index=True
    )
    description: Mapped[str] = mapped_column(String(128))
    qty: Mapped[int] = mapped_column(Integer, default=1)
    arm_m: Mapped[float] = mapped_column(_measure())
    weight_kg: Mapped[float] = mapped_column(_measure())
    index: Mapped[float] = mapped_column(_measure())
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    flight_record: Mapped[FlightRecordRow] = relationship(back_populates="crew_details")
