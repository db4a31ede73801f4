"""
Pydantic schemas for participant input validation.
"""

from typing import Optional
from pydantic import BaseModel

from eventgraph.schemas.base import INPUT_CONFIG


class ParticipantCreate(BaseModel):
    user_id: str
    event_id: str

    model_config = INPUT_CONFIG


class ParticipantUpdate(BaseModel):
    user_id: Optional[str] = None
    event_id: Optional[str] = None

    model_config = INPUT_CONFIG
