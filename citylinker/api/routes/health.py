"""Health check: process is up, plus a database round-trip."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from citylinker.core.config import APP_VERSION, get_settings
from citylinker.core.database import check_db_connected, get_db
from citylinker.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Annotated[Session, Depends(get_db)]) -> HealthResponse:
    """Always 200 while the process runs; `database` reports whether SELECT 1 succeeded."""
    return HealthResponse(
        version=APP_VERSION,
        environment=get_settings().APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
