from __future__ import annotations

import datetime as dt
import uuid

from sqlalchemy import Date, DateTime, String, Text, Time, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from fenix.db.session import Base


class CalendarEvent(Base):
    __tablename__ = "calendar_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200))
    description: Mapped[str] = mapped_column(Text, default="")
    event_date: Mapped[dt.date] = mapped_column(Date, index=True)
    event_time: Mapped[dt.time] = mapped_column(Time)
    created_by: Mapped[str] = mapped_column(String(120))

    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
