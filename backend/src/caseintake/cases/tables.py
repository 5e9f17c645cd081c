"""SQLAlchemy table definition for stored cases."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class CaseRow(Base):
    """One row of the ``cases`` table."""

    __tablename__ = "cases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    case_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    case_external_id: Mapped[str | None] = mapped_column(Text, unique=True, nullable=True)

    contact_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    phone_number: Mapped[str] = mapped_column(Text, nullable=False, default="")
    pet_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    pet_species: Mapped[str] = mapped_column(Text, nullable=False, default="")
    pet_breed: Mapped[str] = mapped_column(Text, nullable=False, default="")
    initial_request: Mapped[str] = mapped_column(Text, nullable=False, default="")
    source_system: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        Text, nullable=False, default="open", comment="open, in_progress, closed"
    )
    outcome: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        comment="pet_kept_in_home, referred_to_vet, surrendered, returned_to_owner, other",
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


cases_table = CaseRow.__table__
