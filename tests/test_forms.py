"""Tests for hottake/forms.py."""

import pytest
from unittest.mock import AsyncMock

from hottake.app_state import AppState
from hottake.errors import NetworkError, ValidationError
from hottake.forms import CREATE_DEBATE_ERROR, CreateDebateForm, ProfileForm
from hottake.models import DebateDraft, Profile
from hottake.profile_store import ProfileStore
from tests.conftest import MockDebatesService, RecordingNavigator


# --- profile form ---


def test_profile_form_prefilled_from_current_user(profile_store, app_state, navigator, sample_profile):
    app_state.apply_profile(sample_profile)
    form = ProfileForm(profile_store, app_state, navigator)
    assert form.fields == {"name": "Alice", "age": "22", "gender": "female"}


def test_profile_form_blank_for_fresh_user(profile_store, app_state, navigator):
    form = ProfileForm(profile_store, app_state, navigator)
    assert form.fields == {"name": "", "age": "", "gender": None}


async def test_profile_form_save(profile_store: ProfileStore, app_state: AppState, navigator: RecordingNavigator):
    form = ProfileForm(profile_store, app_state, navigator)
    form.set_field("name", "Alice")
    form.set_field("age", "22")
    form.select_gender("female")

    saved = await form.save()

    assert saved is not None
    assert saved.id
    assert app_state.current_user == saved
    assert profile_store.read() == saved
    assert navigator.paths == ["/"]
    assert form.error == ""


async def test_profile_form_clears_age(profile_store, app_state, navigator, sample_profile):
    profile_store.write(sample_profile)
    profile_store.load_into_state()
    form = ProfileForm(profile_store, app_state, navigator)
    form.set_field("age", "")
    saved = await form.save()
    assert saved.age is None
    assert saved.id == "u-1"


@pytest.mark.parametrize("age", ["-1", "151", "old"])
async def test_profile_form_invalid_age(profile_store, app_state, navigator, sample_profile, age):
    profile_store.write(sample_profile)
    profile_store.load_into_state()
    form = ProfileForm(profile_store, app_state, navigator)
    form.set_field("age", age)

    assert await form.save() is None

    assert isinstance(form.failure, ValidationError)
    assert "Age" in form.error
    assert profile_store.read() == sample_profile
    assert app_state.current_user == sample_profile
    assert navigator.paths == []


async def test_profile_form_requires_name(profile_store, app_state, navigator):
    form = ProfileForm(profile_store, app_state, navigator)
    form.set_field("age", "30")
    assert await form.save() is None
    assert form.error == "Name is required"
    assert profile_store.read() is None


def test_profile_form_unknown_field(profile_store, app_state, navigator):
    form = ProfileForm(profile_store, app_state, navigator)
    with pytest.raises(KeyError):
        form.set_field("email", "a@b.c")


async def test_two_profile_forms_share_identity(profile_store, app_state, navigator):
    first = ProfileForm(profile_store, app_state, navigator)
    first.set_field("name", "Alice")
    saved = await first.save()

    second = ProfileForm(profile_store, app_state, navigator)
    assert second.fields["name"] == "Alice"
    second.set_field("name", "Alicia")
    again = await second.save()
    assert again.id == saved.id


# --- create debate form ---


@pytest.fixture
def owner(app_state: AppState, sample_profile: Profile) -> Profile:
    app_state.apply_profile(sample_profile)
    return sample_profile


async def test_create_form_empty_title_rejected_before_network(mock_service, navigator, owner):
    form = CreateDebateForm(mock_service, navigator)
    form.set_title("")

    assert await form.submit() is None

    assert isinstance(form.failure, ValidationError)
    assert form.error == "Title is required"
    mock_service.create_debate.assert_not_awaited()
    assert navigator.paths == []


async def test_create_form_long_title_rejected(mock_service, navigator, owner):
    form = CreateDebateForm(mock_service, navigator, title_max_len=25)
    form.set_title("x" * 26)
    assert await form.submit() is None
    assert "25" in form.error
    mock_service.create_debate.assert_not_awaited()


async def test_create_form_submit_navigates_to_new_debate(mock_service, navigator, owner):
    form = CreateDebateForm(mock_service, navigator)
    form.set_title("  pineapple pizza ")

    debate = await form.submit()

    assert debate.id == "new-1"
    assert debate.owner_id == "u-1"
    mock_service.create_debate.assert_awaited_once_with(DebateDraft(title="pineapple pizza"))
    assert navigator.paths == ["/debate/new-1"]
    assert form.is_loading is False


async def test_create_form_network_error(mock_service, navigator, owner):
    mock_service.create_debate = AsyncMock(side_effect=NetworkError("create_debate", "HTTP 500", 500))
    form = CreateDebateForm(mock_service, navigator)
    form.set_title("pizza")

    assert await form.submit() is None

    assert form.error == CREATE_DEBATE_ERROR
    assert form.is_loading is False
    assert navigator.paths == []


async def test_create_form_without_saved_profile(app_state, navigator, sample_debates):
    service = MockDebatesService(app_state, sample_debates)
    service.create_debate = AsyncMock(side_effect=ValidationError("ownerId", "Save your profile before creating a debate"))
    form = CreateDebateForm(service, navigator)
    form.set_title("pizza")
    assert await form.submit() is None
    assert form.error == "Save your profile before creating a debate"


async def test_create_form_discard(mock_service, navigator):
    form = CreateDebateForm(mock_service, navigator)
    form.set_title("half written")
    await form.discard()
    assert form.title == ""
    assert navigator.paths == ["/"]
    mock_service.create_debate.assert_not_awaited()
