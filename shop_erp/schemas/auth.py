from __future__ import annotations

from pydantic import BaseModel, Field


class Identity(BaseModel):
    """Signed-in user as persisted in the session cookie."""
    username: str = Field(..., description="Login name")
    name: str = Field(..., description="Display name")
    role: str = Field(..., description="Role shown in the header")
