"""Client records - /v1/clients"""

import uuid
from datetime import datetime
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from boutique_ledger.api.v1.schemas import ClientCreate, ClientSchema
from boutique_ledger.domain.models import Client
from boutique_ledger.infrastructure.database.session import get_db
from boutique_ledger.infrastructure.database.repositories import ClientRepository

router = APIRouter()


@router.post("/clients", response_model=ClientSchema, status_code=201)
def create_client(request_body: ClientCreate, db: Session = Depends(get_db)):
    """Register a new client"""
    client = Client(
        id=str(uuid.uuid4()),
        first_name=request_body.first_name,
        last_name=request_body.last_name,
        phone=request_body.phone,
        email=request_body.email,
        address=request_body.address,
        created_at=datetime.now(),
    )
    ClientRepository(db).save(client)
    db.commit()
    return ClientSchema.model_validate(client)


@router.get("/clients", response_model=List[ClientSchema])
def list_clients(db: Session = Depends(get_db)):
    """All clients, newest first"""
    return [ClientSchema.model_validate(c) for c in ClientRepository(db).get_all()]


@router.get("/clients/{client_id}", response_model=ClientSchema)
def get_client(client_id: str, db: Session = Depends(get_db)):
    client = ClientRepository(db).get(client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")
    return ClientSchema.model_validate(client)
