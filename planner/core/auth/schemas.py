# planner/core/auth/schemas.py

from __future__ import annotations

from pydantic import BaseModel, Field


class TokenData(BaseModel):
    """
    Data carried inside the JWT.
    The standard 'sub' claim holds the user id.
    """
    user_id: str = Field(..., min_length=1, description="User ID within our application")
