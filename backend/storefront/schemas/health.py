"""
Storefront Backend: Health Check Schema
=========================================

Returned by GET /health. Kept outside the `{code, message, data}` envelope so
load balancers can read `status` directly.
"""

from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    database_backend: str = Field(description="SQLAlchemy dialect name, e.g. postgresql")
    database_latency_ms: Optional[float] = Field(
        default=None, description="SELECT 1 round trip; null when the probe failed"
    )
    uptime_seconds: float = Field(description="Seconds since service started")
