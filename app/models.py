from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata

APPOINTMENT_STATUSES = ("scheduled", "completed", "cancelled", "no-show")
APPOINTMENT_TYPES = ("appointment", "walk-in")
SERVICE_CATEGORIES = ("haircut", "beard", "combo", "special", "addon")
USER_ROLES = ("MANAGER", "BARBER")


class AuthUser(Base):
    __tablename__ = "auth_user"
    __table_args__ = (Index("ix_auth_user_email", "email", unique=True),)

    id = mapped_column(Integer, primary_key=True)
    email = mapped_column(String(255), nullable=False)
    password_hash = mapped_column(LargeBinary(72), nullable=False)
    role = mapped_column(Enum(*USER_ROLES, name="user_role"), nullable=False)
    created_at = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))

    barber: Mapped[Optional["Barber"]] = relationship(
        "Barber", uselist=False, back_populates="user"
    )


class Barber(Base):
    __tablename__ = "barbers"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"], ["auth_user.id"], ondelete="SET NULL", name="fk_barber_user"
        ),
        Index("ix_barbers_user_id", "user_id"),
        Index("ix_barbers_active", "active"),
    )

    id = mapped_column(Integer, primary_key=True)
    user_id = mapped_column(Integer)
    name = mapped_column(String(120), nullable=False)
    email = mapped_column(String(255), nullable=False)
    phone = mapped_column(String(40))
    age = mapped_column(Integer)
    specialty = mapped_column(String(120))
    bio = mapped_column(Text)
    photo_url = mapped_column(String(512))
    join_date = mapped_column(Date, nullable=False, default=lambda: datetime.now().date())
    total_cuts = mapped_column(Integer, nullable=False, default=0)
    appointment_cuts = mapped_column(Integer, nullable=False, default=0)
    walk_in_cuts = mapped_column(Integer, nullable=False, default=0)
    commission_rate = mapped_column(Numeric(5, 2), nullable=False, default=60)
    total_commission = mapped_column(Numeric(10, 2), nullable=False, default=0)
    active = mapped_column(Boolean, nullable=False, default=True)
    rating = mapped_column(Numeric(3, 1))
    created_at = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))

    user: Mapped[Optional["AuthUser"]] = relationship(
        "AuthUser", back_populates="barber"
    )
    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment", uselist=True, back_populates="barber"
    )
    reviews: Mapped[List["Review"]] = relationship(
        "Review", uselist=True, back_populates="barber"
    )
    payouts: Mapped[List["Payout"]] = relationship(
        "Payout", uselist=True, back_populates="barber"
    )


class Client(Base):
    __tablename__ = "clients"
    __table_args__ = (
        ForeignKeyConstraint(
            ["preferred_barber_id"],
            ["barbers.id"],
            ondelete="SET NULL",
            name="fk_client_barber",
        ),
        Index("ix_clients_name", "name"),
    )

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(120), nullable=False)
    email = mapped_column(String(255))
    phone = mapped_column(String(40))
    preferred_barber_id = mapped_column(Integer)
    total_visits = mapped_column(Integer, nullable=False, default=0)
    last_visit = mapped_column(Date)
    notes = mapped_column(Text)
    created_at = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))

    preferred_barber: Mapped[Optional["Barber"]] = relationship("Barber")
    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment", uselist=True, back_populates="client"
    )


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (Index("ix_services_name", "name"),)

    id = mapped_column(Integer, primary_key=True)
    name = mapped_column(String(120), nullable=False)
    description = mapped_column(Text)
    duration = mapped_column(Integer, nullable=False, default=30)
    price = mapped_column(Numeric(10, 2), nullable=False, default=0)
    is_popular = mapped_column(Boolean, nullable=False, default=False)
    category = mapped_column(
        Enum(*SERVICE_CATEGORIES, name="service_category"),
        nullable=False,
        default="haircut",
    )
    discount_percentage = mapped_column(Numeric(5, 2))
    image_key = mapped_column(String(255))
    created_at = mapped_column(DateTime, server_default=text("CURRENT_TIMESTAMP"))

    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment", uselist=True, back_populates="service"
    )


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["client_id"], ["clients.id"], ondelete="SET NULL", name="fk_ap_client"
        ),
        ForeignKeyConstraint(["barber_id"], ["barbers.id"], name="fk_ap_barber"),
        ForeignKeyConstraint(
            ["service_id"], ["services.id"], ondelete="SET NULL", name="fk_ap_service"
        ),
        Index("ix_ap_barber_slot", "barber_id", "date", "time"),
        Index("ix_ap_client", "client_id", "date"),
        Index("ix_ap_date", "date"),
    )

    id = mapped_column(Integer, primary_key=True)
    client_id = mapped_column(Integer)
    barber_id = mapped_column(Integer, nullable=False)
    service_id = mapped_column(Integer)
    date = mapped_column(Date, nullable=False)
    time = mapped_column(String(5), nullable=False)
    status = mapped_column(
        Enum(*APPOINTMENT_STATUSES, name="appointment_status"),
        nullable=False,
        default="scheduled",
    )
    type = mapped_column(
        Enum(*APPOINTMENT_TYPES, name="appointment_type"),
        nullable=False,
        default="appointment",
    )
    duration = mapped_column(Integer, nullable=False, default=60)
    price = mapped_column(Numeric(10, 2), nullable=False, default=0)
    # Stored in cents; see compute_commission
    commission_amount = mapped_column(Numeric(10, 2), nullable=False, default=0)
    notes = mapped_column(Text)
    walk_in_client_name = mapped_column(String(120))
    created_at = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=text("CURRENT_TIMESTAMP")
    )

    client: Mapped[Optional["Client"]] = relationship(
        "Client", back_populates="appointments"
    )
    barber: Mapped["Barber"] = relationship("Barber", back_populates="appointments")
    service: Mapped[Optional["Service"]] = relationship(
        "Service", back_populates="appointments"
    )


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        ForeignKeyConstraint(
            ["barber_id"], ["barbers.id"], ondelete="CASCADE", name="fk_review_barber"
        ),
        Index("ix_reviews_barber", "barber_id", "approved"),
    )

    id = mapped_column(Integer, primary_key=True)
    barber_id = mapped_column(Integer, nullable=False)
    client_name = mapped_column(String(120), nullable=False)
    client_email = mapped_column(String(255))
    rating = mapped_column(Integer, nullable=False)
    comment = mapped_column(Text)
    approved = mapped_column(Boolean, nullable=False, default=False)
    created_at = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=text("CURRENT_TIMESTAMP")
    )

    barber: Mapped["Barber"] = relationship("Barber", back_populates="reviews")


class Payout(Base):
    __tablename__ = "payouts"
    __table_args__ = (
        ForeignKeyConstraint(
            ["barber_id"], ["barbers.id"], ondelete="SET NULL", name="fk_payout_barber"
        ),
        ForeignKeyConstraint(
            ["user_id"], ["auth_user.id"], ondelete="SET NULL", name="fk_payout_user"
        ),
        ForeignKeyConstraint(
            ["reversed_payout_id"],
            ["payouts.id"],
            ondelete="SET NULL",
            name="fk_payout_reversal",
        ),
        Index("ix_payouts_created", "created_at"),
        Index("ix_payouts_barber", "barber_id", "created_at"),
    )

    id = mapped_column(Integer, primary_key=True)
    created_at = mapped_column(
        DateTime, nullable=False, default=datetime.now, server_default=text("CURRENT_TIMESTAMP")
    )
    amount = mapped_column(Numeric(10, 2), nullable=False)
    reason = mapped_column(String(255), nullable=False)
    user_id = mapped_column(Integer)
    user_name = mapped_column(String(120))
    barber_id = mapped_column(Integer)
    reversed_payout_id = mapped_column(Integer)

    barber: Mapped[Optional["Barber"]] = relationship(
        "Barber", back_populates="payouts"
    )
    reversed_payout: Mapped[Optional["Payout"]] = relationship(
        "Payout", remote_side="Payout.id"
    )
