"""SQLAlchemy ORM models for the CRM tables.

Column and table names match the SQLite schema of the desktop release so that an
existing ``database.db`` can be opened directly.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Naive UTC timestamp; all datetimes are stored naive in UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    company_name: Mapped[str] = mapped_column(Text, nullable=False)
    contact_person: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(Text)
    email: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    service_records: Mapped[list["ServiceRecord"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reminders: Mapped[list["Reminder"]] = relationship(
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Customer(customer_id={self.customer_id!r}, company_name={self.company_name!r})"


class ServiceRecord(Base):
    __tablename__ = "service_records"
    __table_args__ = {"sqlite_autoincrement": True}

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.customer_id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    service_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    service_type: Mapped[str | None] = mapped_column(Text)
    service_description: Mapped[str | None] = mapped_column(Text)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(14, 2, asdecimal=True))
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="completed")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer: Mapped[Customer] = relationship(back_populates="service_records")
    reminders: Mapped[list["Reminder"]] = relationship(
        back_populates="service_record",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"ServiceRecord(record_id={self.record_id!r}, customer_id={self.customer_id!r})"


class Reminder(Base):
    __tablename__ = "reminders"
    __table_args__ = {"sqlite_autoincrement": True}

    reminder_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.customer_id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    service_record_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("service_records.record_id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        index=True,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    reminder_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="scheduled")
    sent_at: Mapped[datetime | None] = mapped_column(DateTime)
    outlook_event_id: Mapped[str | None] = mapped_column(Text)
    outlook_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_by: Mapped[str] = mapped_column(String(32), nullable=False, default="system")
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    customer: Mapped[Customer] = relationship(back_populates="reminders")
    service_record: Mapped[ServiceRecord | None] = relationship(back_populates="reminders")

    def __repr__(self) -> str:
        return f"Reminder(reminder_id={self.reminder_id!r}, status={self.status!r})"
