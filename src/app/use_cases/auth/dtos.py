"""
Account Action DTOs (Data Transfer Objects)

Every account action answers with the same state shape, whatever branch
it took. The API layer serializes it without the None members.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ActionState(BaseModel):
    """
    Result state of one form action.

    errors: per-field message lists (validation failures only)
    message: user-facing summary
    success: set only by branches that report success in-place
    redirect_to: navigation hint for completed actions, not serialized
    """

    errors: Optional[Dict[str, List[str]]] = None
    message: Optional[str] = None
    success: Optional[bool] = None
    redirect_to: Optional[str] = Field(default=None, exclude=True)
