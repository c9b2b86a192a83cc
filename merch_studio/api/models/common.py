"""
Common API models used across different endpoints.

These models represent shared concepts like errors and health status.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

class APIError(BaseModel):
    """Standard error response format."""
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="String form of the underlying exception")

class HealthStatus(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    uptime: float = Field(..., description="Uptime in seconds")
    dependencies: Dict[str, str] = Field(..., description="Status of configured providers")
    default_provider: Optional[str] = Field(None, description="Provider used when the request names none")
    stats: Optional[Dict[str, Any]] = Field(None, description="Per-provider call statistics")
