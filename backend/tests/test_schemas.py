"""
Tests for input models and the patch helpers.
"""

import pytest
from pydantic import ValidationError

from eventgraph.schemas import (
    EventCreate,
    EventUpdate,
    LocationCreate,
    ParticipantCreate,
    UserUpdate,
    apply_patch,
    to_fields,
)


def test_apply_patch_overwrites_present_fields(alice):
    updated = apply_patch(alice, UserUpdate(email="alice@new.com"))
    assert updated == {"id": "1", "username": "alice", "email": "alice@new.com"}


def test_apply_patch_is_pure(alice):
    before = dict(alice)
    apply_patch(alice, UserUpdate(username="bob"))
    assert alice == before


def test_empty_patch_leaves_record_unchanged(alice):
    assert apply_patch(alice, UserUpdate()) == alice


def test_null_field_means_no_change(alice):
    assert apply_patch(alice, UserUpdate(username=None, email="z@x.com"))["username"] == "alice"


def test_event_from_field_uses_wire_name():
    event = EventCreate.model_validate({"title": "Launch", "desc": "", "date": "2024-05-01", "from": "10:00"})
    assert to_fields(event) == {"title": "Launch", "desc": "", "date": "2024-05-01", "from": "10:00"}

    patch = EventUpdate(from_="11:00")
    assert apply_patch({"id": "e1", "from": "10:00", "to": "12:00"}, patch) == {
        "id": "e1",
        "from": "11:00",
        "to": "12:00",
    }


def test_numeric_ids_become_strings():
    participant = ParticipantCreate.model_validate({"user_id": 7, "event_id": "abc"})
    assert participant.user_id == "7"


def test_unknown_fields_rejected():
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({"id": "2"})


def test_location_requires_coordinates():
    with pytest.raises(ValidationError):
        LocationCreate.model_validate({"name": "HQ", "desc": "Main office", "lat": 1.0})
