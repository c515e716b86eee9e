"""Local profile persistence and merge-patch updates of the current user."""

import json
import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from hottake.app_state import AppState
from hottake.errors import MalformedProfileError, ValidationError
from hottake.models import UNSET, Profile, ProfilePatch
from hottake.storage import KeyValueStorage
from hottake.validation import validate_age, validate_gender, validate_name

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_KEY = "hottake_user_profile"


@dataclass(frozen=True)
class StoredProfile:
    """Result of get_or_create: ``is_fresh`` is True when nothing was persisted."""

    profile: Profile
    is_fresh: bool


def _new_identifier() -> str:
    return str(uuid.uuid4())


def encode_profile(profile: Profile) -> str:
    return json.dumps(
        {
            "id": profile.id,
            "name": profile.name,
            "age": profile.age,
            "gender": profile.gender,
        },
        indent=2,
    )


def decode_profile(payload: str) -> Profile:
    """Parse a persisted profile.

    Raises:
        MalformedProfileError: If the payload is not a valid profile record.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedProfileError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedProfileError(f"Expected an object, got {type(data).__name__}")

    raw_id = data.get("id")
    if raw_id is not None and not isinstance(raw_id, (str, int)):
        raise MalformedProfileError(f"Invalid id: {raw_id!r}")

    try:
        return Profile(
            id=str(raw_id) if raw_id is not None else None,
            name=validate_name(data.get("name")),
            age=validate_age(data.get("age")),
            gender=validate_gender(data.get("gender")),
        )
    except ValidationError as exc:
        raise MalformedProfileError(str(exc)) from exc


class ProfileStore:
    """Reads, writes and patches the persisted profile.

    Every successful ``update`` is applied in place to the shared
    ``AppState.current_user`` so live consumers see it without refetching.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        state: AppState,
        key: str = DEFAULT_PROFILE_KEY,
        id_factory: Callable[[], str] = _new_identifier,
    ) -> None:
        self._storage = storage
        self._state = state
        self._key = key
        self._id_factory = id_factory

    def read(self) -> Profile | None:
        """Return the persisted profile, or None if absent or malformed."""
        payload = self._storage.get_item(self._key)
        if payload is None:
            return None
        try:
            return decode_profile(payload)
        except MalformedProfileError as exc:
            logger.warning("Ignoring malformed stored profile: %s", exc)
            return None

    def write(self, profile: Profile) -> Profile:
        """Persist the full profile. Validates first so nothing invalid is stored."""
        validated = Profile(
            id=profile.id,
            name=validate_name(profile.name),
            age=validate_age(profile.age),
            gender=validate_gender(profile.gender),
        )
        self._storage.set_item(self._key, encode_profile(validated))
        return validated

    def update(self, patch: ProfilePatch) -> Profile:
        """Merge ``patch`` over the stored profile, persist, and publish.

        UNSET fields keep the stored value. The id is minted on the first
        update and preserved by every later one.

        Raises:
            ValidationError: If a provided field is invalid, or the merged
                profile would have no name. Nothing is written in that case.
        """
        base = self.read() or Profile()

        merged = Profile(
            id=base.id,
            name=base.name if patch.name is UNSET else validate_name(patch.name),
            age=base.age if patch.age is UNSET else validate_age(patch.age),
            gender=base.gender if patch.gender is UNSET else validate_gender(patch.gender),
        )
        if not merged.name:
            raise ValidationError("name", "Name is required")

        if merged.id is None:
            merged.id = self._id_factory()
            logger.info("Assigned new profile id %s", merged.id)

        saved = self.write(merged)
        self._state.apply_profile(saved)
        return saved

    def get_or_create(self) -> StoredProfile:
        """Return the stored profile, or an empty unsaved one flagged fresh."""
        profile = self.read()
        if profile is None:
            return StoredProfile(profile=Profile(), is_fresh=True)
        return StoredProfile(profile=profile, is_fresh=False)

    def load_into_state(self) -> StoredProfile:
        """Initialize the shared current user from storage at startup."""
        stored = self.get_or_create()
        self._state.apply_profile(stored.profile)
        return stored

    def clear(self) -> None:
        """Remove all persisted data and reset the shared current user."""
        self._storage.clear()
        self._state.reset_user()
