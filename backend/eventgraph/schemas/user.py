"""
Pydantic schemas for user input validation.
"""

from typing import Optional
from pydantic import BaseModel

from eventgraph.schemas.base import INPUT_CONFIG


class UserCreate(BaseModel):
    username: str
    email: str

    model_config = INPUT_CONFIG


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None

    model_config = INPUT_CONFIG
