"""Health endpoint body."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    service: str = "gatekeeper"
    environment: str = Field(description="APP_ENV the process was started with")
    database: Literal["connected", "disconnected"] | None = None
    # Without seeded permissions every role creation fails with UNKNOWN_PERMISSION.
    catalog: Literal["seeded", "empty"] | None = Field(
        default=None,
        description="Permission catalog state; omitted when the database is unreachable",
    )
