"""Communications log — System rows double as the job status audit trail."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, ULIDMixin


class CommunicationModel(Base, ULIDMixin):
    __tablename__ = "communications"

    organization_id: Mapped[str] = mapped_column(String(64), index=True)
    customer_id: Mapped[str] = mapped_column(String(500), index=True)
    job_id: Mapped[str | None] = mapped_column(String(26), nullable=True, default=None, index=True)
    type: Mapped[str] = mapped_column(String(10), default="System")  # SMS | Email | Call | System
    subject: Mapped[str] = mapped_column(String(200))
    body: Mapped[str] = mapped_column(Text, default="")
    old_status: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
    new_status: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
