from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fenix.db.session import get_db
from fenix.schemas.client import ClientCreate, ClientOut, ClientUpdate
from fenix.services import clients as client_service

router = APIRouter()


@router.get("/", response_model=list[ClientOut])
def list_clients(db: Session = Depends(get_db)):
    return [ClientOut.model_validate(c) for c in client_service.list_clients(db)]


@router.post("/", response_model=ClientOut)
def create_client(payload: ClientCreate, db: Session = Depends(get_db)):
    return ClientOut.model_validate(client_service.create_client(db, payload))


@router.patch("/{client_id}", response_model=ClientOut)
def update_client(client_id: uuid.UUID, payload: ClientUpdate, db: Session = Depends(get_db)):
    return ClientOut.model_validate(client_service.update_client(db, client_id=client_id, payload=payload))


@router.delete("/{client_id}")
def delete_client(client_id: uuid.UUID, db: Session = Depends(get_db)):
    client_service.delete_client(db, client_id=client_id)
    return {"ok": True}
