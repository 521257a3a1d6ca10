from __future__ import annotations

import uuid
from decimal import Decimal

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fenix.models.client import Client


def list_clients(db: Session) -> list[Client]:
    return db.query(Client).order_by(Client.name.asc()).all()


def get_client_or_404(db: Session, client_id: uuid.UUID) -> Client:
    c = db.get(Client, client_id)
    if not c:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return c


def create_client(db: Session, payload) -> Client:
    c = Client(
        name=payload.name.strip(),
        tax_id=payload.tax_id.strip(),
        interest_percent=Decimal(str(payload.interest_percent)),
        fine_percent=Decimal(str(payload.fine_percent)),
        notes=payload.notes,
    )
    db.add(c)
    db.commit()
    db.refresh(c)
    return c


def update_client(db: Session, *, client_id: uuid.UUID, payload) -> Client:
    c = get_client_or_404(db, client_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(c, field, value)
    db.commit()
    db.refresh(c)
    return c


def delete_client(db: Session, *, client_id: uuid.UUID) -> None:
    """Deletes the client and, through the relationship cascade, its invoices."""
    c = get_client_or_404(db, client_id)
    db.delete(c)
    db.commit()
