"""Editable form views: the profile editor and the create-debate form."""

import logging

from hottake.app_state import AppState
from hottake.directory import DebatesService
from hottake.errors import HotTakeError, NetworkError, ValidationError
from hottake.models import Debate, DebateDraft, Profile, ProfilePatch
from hottake.navigation import HOME, Navigator, debate_path
from hottake.profile_store import ProfileStore
from hottake.validation import DEFAULT_TITLE_MAX_LEN, validate_title

logger = logging.getLogger(__name__)

CREATE_DEBATE_ERROR = "Failed to create debate. Please try again later."


class ProfileForm:
    """Edits the current user. Fields start from the shared profile."""

    def __init__(self, store: ProfileStore, state: AppState, navigator: Navigator) -> None:
        self._store = store
        self._navigator = navigator
        user = state.user_snapshot()
        self.fields: dict[str, object] = {
            "name": user.name,
            "age": "" if user.age is None else str(user.age),
            "gender": user.gender,
        }
        self.failure: HotTakeError | None = None

    @property
    def error(self) -> str:
        if isinstance(self.failure, ValidationError):
            return self.failure.message
        return str(self.failure) if self.failure else ""

    def set_field(self, name: str, value: object) -> None:
        if name not in self.fields:
            raise KeyError(f"Unknown profile field: {name}")
        self.fields[name] = value

    def select_gender(self, gender: str | None) -> None:
        self.set_field("gender", gender)

    async def save(self) -> Profile | None:
        """Validate and persist. Returns the saved profile, or None on error."""
        self.failure = None
        try:
            profile = self._store.update(ProfilePatch.from_mapping(self.fields))
        except ValidationError as exc:
            logger.info("Profile not saved: %s", exc)
            self.failure = exc
            return None
        await self._navigator.navigate(HOME)
        return profile


class CreateDebateForm:
    def __init__(
        self,
        service: DebatesService,
        navigator: Navigator,
        title_max_len: int = DEFAULT_TITLE_MAX_LEN,
    ) -> None:
        self._service = service
        self._navigator = navigator
        self._title_max_len = title_max_len
        self.title = ""
        self.is_loading = False
        self.failure: HotTakeError | None = None

    @property
    def error(self) -> str:
        if isinstance(self.failure, ValidationError):
            return self.failure.message
        if isinstance(self.failure, NetworkError):
            return CREATE_DEBATE_ERROR
        return ""

    def set_title(self, value: str) -> None:
        self.title = value

    async def submit(self) -> Debate | None:
        """Create the debate and open it. Returns None on error.

        The title is checked before any network call.
        """
        self.failure = None
        try:
            title = validate_title(self.title, self._title_max_len)
        except ValidationError as exc:
            self.failure = exc
            return None

        self.is_loading = True
        try:
            debate = await self._service.create_debate(DebateDraft(title=title))
        except (ValidationError, NetworkError) as exc:
            logger.warning("Failed to create debate: %s", exc)
            self.failure = exc
            return None
        finally:
            self.is_loading = False

        await self._navigator.navigate(debate_path(debate.id))
        return debate

    async def discard(self) -> None:
        self.title = ""
        self.failure = None
        await self._navigator.navigate(HOME)
