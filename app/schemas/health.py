"""Response schema for GET /health."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness plus a database probe; returned with 200 even when the database is down."""

    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"]
