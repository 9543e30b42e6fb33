"""SQLAlchemy models for all database tables."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quickflex_admin.core.database import Base


def _new_driver_id() -> str:
    return str(uuid.uuid4())


class Driver(Base):
    """Driver being onboarded; the primary record of every profile."""

    __tablename__ = "drivers"

    driver_id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=_new_driver_id
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(32), nullable=True)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    license_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    license_state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    license_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default="New Registered"
    )  # New Registered | Approved | Rejected | ...
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    vehicles: Mapped[list["Vehicle"]] = relationship(
        "Vehicle", back_populates="driver", cascade="all, delete-orphan"
    )
    background_checks: Mapped[list["BackgroundCheck"]] = relationship(
        "BackgroundCheck", back_populates="driver", cascade="all, delete-orphan"
    )
    insurance_policies: Mapped[list["Insurance"]] = relationship(
        "Insurance", back_populates="driver", cascade="all, delete-orphan"
    )
    banking: Mapped["BankingDetails | None"] = relationship(
        "BankingDetails", back_populates="driver", cascade="all, delete-orphan", uselist=False
    )

    __table_args__ = (
        Index("idx_drivers_status", "status"),
        Index("idx_drivers_registration_date", "registration_date"),
    )


class Vehicle(Base):
    """Vehicle registered by a driver, keyed naturally by VIN."""

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("drivers.driver_id", ondelete="CASCADE"), nullable=False
    )
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    vin: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    license_plate: Mapped[str | None] = mapped_column(String(20), nullable=True)
    inspection_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    driver: Mapped["Driver"] = relationship("Driver", back_populates="vehicles")

    __table_args__ = (
        Index("idx_vehicles_driver_inspection", "driver_id", "inspection_date"),
    )


class BackgroundCheck(Base):
    """Background check result; a driver accumulates these over time."""

    __tablename__ = "background_checks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("drivers.driver_id", ondelete="CASCADE"), nullable=False
    )
    check_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    provider: Mapped[str | None] = mapped_column(String(100), nullable=True)
    result: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    check_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    driver: Mapped["Driver"] = relationship("Driver", back_populates="background_checks")

    __table_args__ = (
        Index("idx_background_checks_driver_date", "driver_id", "check_date"),
    )


class Insurance(Base):
    """Insurance policy; a driver accumulates these over time."""

    __tablename__ = "insurance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("drivers.driver_id", ondelete="CASCADE"), nullable=False
    )
    provider: Mapped[str | None] = mapped_column(String(100), nullable=True)
    policy_number: Mapped[str] = mapped_column(String(100), nullable=False)
    coverage_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    driver: Mapped["Driver"] = relationship("Driver", back_populates="insurance_policies")

    __table_args__ = (
        Index("idx_insurance_driver_start", "driver_id", "start_date"),
    )


class BankingDetails(Base):
    """Payout bank account, one per driver."""

    __tablename__ = "banking_details"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("drivers.driver_id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    bank_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    account_holder_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(34), nullable=True)
    routing_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=True
    )

    driver: Mapped["Driver"] = relationship("Driver", back_populates="banking")
