"""
Pydantic schemas for event input validation.

`from` is a Python keyword, so the field is declared as `from_` and
carries the alias used on the wire and in the data file.
"""

from typing import Optional
from pydantic import BaseModel, Field

from eventgraph.schemas.base import INPUT_CONFIG


class EventCreate(BaseModel):
    title: str
    desc: str
    date: str
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    location_id: Optional[str] = None
    user_id: Optional[str] = None

    model_config = INPUT_CONFIG


class EventUpdate(BaseModel):
    title: Optional[str] = None
    desc: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = Field(None, alias="from")
    to: Optional[str] = None
    location_id: Optional[str] = None
    user_id: Optional[str] = None

    model_config = INPUT_CONFIG
