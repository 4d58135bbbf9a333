"""Health check payload."""

from typing import Literal

from pydantic import Field

from citylinker.schemas.base import ApiModel


class HealthResponse(ApiModel):
    """Liveness plus a database probe, for load balancers and uptime checks."""

    status: Literal["ok"] = "ok"
    version: str
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 on the request's session"
    )
