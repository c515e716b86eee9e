"""Tests for hottake/models.py dataclasses."""

import pytest

from hottake.models import UNSET, Debate, Participant, Profile, ProfilePatch, SessionState


def test_profile_defaults_are_empty():
    profile = Profile()
    assert profile.id is None
    assert profile.name == ""
    assert profile.is_empty()


def test_profile_with_name_not_empty(sample_profile):
    assert not sample_profile.is_empty()


def test_participant_identity_is_id():
    assert Participant(id="p1", name="Bob") == Participant(id="p1", name="Robert")
    assert len({Participant(id="p1", name="Bob"), Participant(id="p1", age=3)}) == 1


def test_participant_count_derived_from_set(sample_debate):
    assert sample_debate.participant_count == 3


def test_debate_without_participants_has_zero_count():
    assert Debate(id="x", title="Empty").participant_count == 0


def test_patch_defaults_unset():
    patch = ProfilePatch()
    assert patch.name is UNSET
    assert patch.age is UNSET
    assert patch.gender is UNSET


def test_patch_none_is_not_unset():
    patch = ProfilePatch(age=None)
    assert patch.age is None
    assert patch.name is UNSET


def test_patch_from_mapping_marks_present_keys():
    patch = ProfilePatch.from_mapping({"age": 0})
    assert patch.age == 0
    assert patch.name is UNSET
    assert patch.gender is UNSET


def test_patch_from_mapping_rejects_unknown_keys():
    with pytest.raises(KeyError):
        ProfilePatch.from_mapping({"nickname": "al"})


def test_session_state_defaults():
    state = SessionState()
    assert state.is_muted is False
    assert state.is_video_on is True
    assert state.focused_participant is None
    assert state.selected_debate is None
    assert state.modal_open is False
