from __future__ import annotations

import datetime as dt
import uuid

from pydantic import BaseModel, Field

from fenix.schemas.common import RecordModel


class CalendarEventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    date: dt.date
    time: dt.time
    created_by: str = Field(min_length=1, max_length=120)


class CalendarEventOut(RecordModel):
    id: uuid.UUID
    title: str
    description: str
    date: dt.date
    time: dt.time
    created_by: str
