"""
API models for the enhance and color endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field

class EnhanceResponse(BaseModel):
    """Successful enhancement: the mockup as a data URI."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    image: str = Field(..., description="data:<mime>;base64,... URI of the enhanced image")
    mime_type: str = Field(..., alias="mimeType", description="Mime type reported by the provider")

class ColorResponse(BaseModel):
    input: str = Field(..., description="Color as typed by the user")
    hex: str = Field(..., description="Normalised #rrggbb color")
