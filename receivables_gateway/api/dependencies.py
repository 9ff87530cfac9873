"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session
from receivables_gateway.infrastructure.database.session import get_db
from receivables_gateway.infrastructure.database.repositories import LedgerStore


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_owner_id(x_owner_id: str | None = Header(None)) -> str:
    """Owner of the records, resolved upstream by the identity service"""
    if not x_owner_id or not x_owner_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-Owner-ID header")
    return x_owner_id.strip()


def get_today() -> date:
    """Calendar day used for overdue and due-soon evaluation"""
    return date.today()


def get_store(db: Session = Depends(get_db)) -> LedgerStore:
    """Provide the storage collaborator for the payment engine"""
    return LedgerStore(db)
