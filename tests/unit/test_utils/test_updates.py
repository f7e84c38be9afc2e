"""Unit tests for apply_updates."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from user_service.utils.updates import apply_updates


@dataclass
class Profile:
    username: str = "alice"
    first_name: str | None = None
    bio: str | None = "hi"


class ProfilePatch(BaseModel):
    username: str | None = None
    first_name: str | None = None
    bio: str | None = None


def test_only_set_fields_are_applied():
    profile = Profile()

    result = apply_updates(profile, ProfilePatch(first_name="Alice"))

    assert result.applied is True
    assert result.changes == {"first_name": "Alice"}
    assert profile.bio == "hi"


def test_unchanged_values_are_not_reported():
    result = apply_updates(Profile(), ProfilePatch(username="alice"))

    assert result.applied is False
    assert result.changes == {}


def test_explicit_none_clears_unless_skipped():
    cleared = Profile()
    kept = Profile()

    apply_updates(cleared, ProfilePatch(bio=None))
    apply_updates(kept, ProfilePatch(bio=None), skip_none=True)

    assert cleared.bio is None
    assert kept.bio == "hi"


def test_fields_and_exclude_limit_scope():
    profile = Profile()

    result = apply_updates(
        profile,
        {"username": "bob", "first_name": "Bob", "bio": "x"},
        fields=["username", "first_name"],
        exclude={"username"},
    )

    assert result.changes == {"first_name": "Bob"}
    assert profile.username == "alice"
