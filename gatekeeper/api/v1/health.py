"""Liveness plus a readiness hint: database reachability and whether the permission catalog is seeded."""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gatekeeper.core.config import settings
from gatekeeper.core.database import check_db_connected, get_db
from gatekeeper.schemas.health import HealthResponse
from gatekeeper.services.store import CredentialStore

router = APIRouter()


def catalog_state(db: Session) -> str | None:
    """'seeded' when at least one permission code exists, 'empty' otherwise, None if unreadable."""
    try:
        codes = CredentialStore(db).permission_codes()
    except SQLAlchemyError:
        return None
    return "seeded" if codes else "empty"


@router.get("/", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    if not check_db_connected(db):
        return HealthResponse(environment=settings.APP_ENV, database="disconnected")
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected",
        catalog=catalog_state(db),
    )
