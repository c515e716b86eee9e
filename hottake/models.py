"""Dataclasses for profiles, debates and the per-view session state."""

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

GENDERS = ("male", "female", "other")


class Unset(enum.Enum):
    """Marks a patch field the caller did not provide."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.UNSET


@dataclass
class Profile:
    id: str | None = None          # assigned on first save, never changes afterwards
    name: str = ""
    age: int | None = None
    gender: str | None = None      # "male", "female", "other"

    def is_empty(self) -> bool:
        return self.id is None and not self.name and self.age is None and self.gender is None


@dataclass
class ProfilePatch:
    """Partial profile update. UNSET keeps the stored value, None clears it."""

    name: str | Unset = UNSET
    age: int | str | None | Unset = UNSET
    gender: str | None | Unset = UNSET

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProfilePatch":
        """Keys present in ``data`` are applied, missing keys stay UNSET."""
        unknown = set(data) - {"name", "age", "gender"}
        if unknown:
            raise KeyError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        return cls(
            name=data.get("name", UNSET),
            age=data.get("age", UNSET),
            gender=data.get("gender", UNSET),
        )


@dataclass(frozen=True)
class Participant:
    """Display-only occupant of a session. Identity is the id."""

    id: str
    name: str = field(default="", compare=False)
    age: int | None = field(default=None, compare=False)
    gender: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class Debate:
    id: str
    title: str
    owner_id: str | None = None
    created_at: datetime | None = None
    participants: frozenset[Participant] = frozenset()

    @property
    def participant_count(self) -> int:
        return len(self.participants)


@dataclass(frozen=True)
class DebateDraft:
    title: str


@dataclass
class SessionState:
    """Transient controls of one debate view. Discarded on leave."""

    is_muted: bool = False
    is_video_on: bool = True
    focused_participant: Participant | None = None
    selected_debate: Debate | None = None
    modal_open: bool = False
