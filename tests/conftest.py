"""Shared pytest fixtures."""

from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import ApiConfig, AppConfig, StorageConfig, UiConfig
from hottake.app_state import AppState
from hottake.directory import DebatesService
from hottake.models import Debate, DebateDraft, Participant, Profile
from hottake.profile_store import ProfileStore
from hottake.storage import KeyValueStorage


@pytest.fixture
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        api=ApiConfig(base_url="http://api.test/api", timeout_sec=5.0),
        storage=StorageConfig(data_dir=tmp_path / "data", profile_key="hottake_user_profile"),
        ui=UiConfig(title_max_len=25),
    )


@pytest.fixture
def storage(tmp_path: Path) -> KeyValueStorage:
    return KeyValueStorage(tmp_path / "data")


@pytest.fixture
def app_state() -> AppState:
    return AppState()


@pytest.fixture
def profile_store(storage: KeyValueStorage, app_state: AppState) -> ProfileStore:
    return ProfileStore(storage, app_state)


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(id="u-1", name="Alice", age=22, gender="female")


@pytest.fixture
def sample_participants() -> frozenset[Participant]:
    return frozenset(
        {
            Participant(id="p1", name="Bob"),
            Participant(id="p2", name="Charlie", age=25),
            Participant(id="p3", name="Diana", gender="other"),
        }
    )


@pytest.fixture
def sample_debate(sample_participants: frozenset[Participant]) -> Debate:
    return Debate(
        id="d1",
        title="T",
        owner_id="u-9",
        created_at=datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        participants=sample_participants,
    )


@pytest.fixture
def sample_debates(sample_debate: Debate) -> list[Debate]:
    return [
        sample_debate,
        Debate(id="d2", title="universal basic income"),
        Debate(id="d3", title="remote vs office", participants=frozenset({Participant(id="p9")})),
    ]


class MockDebatesService(DebatesService):
    """Test double DebatesService; no HTTP client is created."""

    def __init__(self, state: AppState, debates: list[Debate] | None = None) -> None:
        self._state = state
        self._debates = list(debates or [])
        by_id = {d.id: d for d in self._debates}

        async def list_debates() -> list[Debate]:
            state.set_debates(self._debates)
            return list(self._debates)

        async def get_debate(debate_id: str) -> Debate:
            return by_id[debate_id]

        async def create_debate(draft: DebateDraft) -> Debate:
            return Debate(id="new-1", title=draft.title, owner_id=state.current_user.id)

        # Shadow the class methods with AsyncMocks at the instance level.
        self.list_debates = AsyncMock(side_effect=list_debates)  # type: ignore[method-assign]
        self.get_debate = AsyncMock(side_effect=get_debate)  # type: ignore[method-assign]
        self.create_debate = AsyncMock(side_effect=create_debate)  # type: ignore[method-assign]
        self.delete_debate = AsyncMock(return_value=True)  # type: ignore[method-assign]

    async def aclose(self) -> None:
        return None


class RecordingNavigator:
    """Navigator that only records the requested paths."""

    def __init__(self) -> None:
        self.paths: list[str] = []

    async def navigate(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture
def mock_service(app_state: AppState, sample_debates: list[Debate]) -> MockDebatesService:
    return MockDebatesService(app_state, sample_debates)


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()
