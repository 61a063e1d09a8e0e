"""
Session request/response models.
"""
from pydantic import BaseModel, Field
from typing import Dict, Optional


class SessionData(BaseModel):
    """Flat string map stored in the session cookie."""
    data: Dict[str, str] = Field(default_factory=dict, description="Session key/value pairs")


class SessionResponse(BaseModel):
    """Current session contents."""
    data: Dict[str, str] = Field(default_factory=dict, description="Session key/value pairs")


class SuccessResponse(BaseModel):
    """Standard success response for operations."""
    success: bool = Field(True, description="Operation success status")
    message: str = Field(..., description="Human-readable message")
    data: Optional[Dict[str, str]] = Field(None, description="Optional response data")
