"""
Pydantic schemas for location input validation.

Coordinates are stored as given; no range is enforced.
"""

from typing import Optional
from pydantic import BaseModel

from eventgraph.schemas.base import INPUT_CONFIG


class LocationCreate(BaseModel):
    name: str
    desc: str
    lat: float
    lng: float

    model_config = INPUT_CONFIG


class LocationUpdate(BaseModel):
    name: Optional[str] = None
    desc: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    model_config = INPUT_CONFIG
