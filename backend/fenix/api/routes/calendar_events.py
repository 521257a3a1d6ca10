from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.models.calendar_event import CalendarEvent
from fenix.schemas.calendar_event import CalendarEventCreate, CalendarEventOut

router = APIRouter()


def _to_out(e: CalendarEvent) -> CalendarEventOut:
    return CalendarEventOut(
        id=e.id,
        title=e.title,
        description=e.description,
        date=e.event_date,
        time=e.event_time,
        created_by=e.created_by,
    )


@router.get("/", response_model=list[CalendarEventOut])
def list_events(db: Session = Depends(get_db)):
    items = db.query(CalendarEvent).order_by(CalendarEvent.event_date.asc(), CalendarEvent.event_time.asc()).all()
    return [_to_out(e) for e in items]


@router.post("/", response_model=CalendarEventOut)
def create_event(payload: CalendarEventCreate, db: Session = Depends(get_db)):
    e = CalendarEvent(
        title=payload.title,
        description=payload.description,
        event_date=payload.date,
        event_time=payload.time,
        created_by=payload.created_by,
    )
    db.add(e)
    db.commit()
    db.refresh(e)
    return _to_out(e)


@router.delete("/{event_id}")
def delete_event(event_id: uuid.UUID, db: Session = Depends(get_db)):
    e = db.get(CalendarEvent, event_id)
    if not e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    db.delete(e)
    db.commit()
    return {"ok": True}
