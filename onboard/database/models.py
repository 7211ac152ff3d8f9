"""
Database models for the onboarding service.
Uses SQLAlchemy with async support.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class AuthUser(Base):
    """An identity an employee can sign in with (password or OAuth)."""
    __tablename__ = "auth_users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(50), nullable=False, default="password")
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<AuthUser(id={self.id}, provider={self.provider})>"


class Employee(Base):
    """Model representing an onboarded employee."""
    __tablename__ = "employees"

    employee_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str] = mapped_column(String(32), nullable=False)

    department: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(255), nullable=False)
    # ISO 8601: "2024-03-10"
    date_of_joining: Mapped[str] = mapped_column(String(10), nullable=False)

    profile_image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # Linked identity; None means the account is not activated
    auth_user_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        ForeignKey("auth_users.id"),
        unique=True,
        nullable=True,
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Employee(employee_id={self.employee_id}, full_name={self.full_name})>"
