"""Tests for hottake/navigation.py."""

from unittest.mock import AsyncMock

import pytest

from hottake.navigation import CREATE_DEBATE, DEBATE_TEMPLATE, HOME, PROFILE, Router, debate_path


@pytest.fixture
def router() -> Router:
    r = Router()
    r.home = AsyncMock()
    r.debate = AsyncMock()
    r.profile = AsyncMock()
    r.create = AsyncMock()
    r.add_route(HOME, r.home)
    r.add_route(DEBATE_TEMPLATE, r.debate)
    r.add_route(PROFILE, r.profile)
    r.add_route(CREATE_DEBATE, r.create)
    return r


def test_debate_path():
    assert debate_path("d1") == "/debate/d1"


async def test_navigate_home(router: Router):
    await router.navigate("/")
    router.home.assert_awaited_once_with()
    router.debate.assert_not_awaited()


async def test_navigate_passes_path_params(router: Router):
    await router.navigate("/debate/abc-123")
    router.debate.assert_awaited_once_with(debate_id="abc-123")


async def test_navigate_static_routes(router: Router):
    await router.navigate("/profile")
    await router.navigate("/create-debate")
    router.profile.assert_awaited_once()
    router.create.assert_awaited_once()


async def test_history_and_current_path(router: Router):
    assert router.current_path is None
    await router.navigate("/profile")
    await router.navigate("/debate/7")
    assert router.history == ["/profile", "/debate/7"]
    assert router.current_path == "/debate/7"


@pytest.mark.parametrize("path", ["/debate/", "/debate/a/b", "/nowhere", "profile"])
async def test_unknown_path_raises(router: Router, path: str):
    with pytest.raises(LookupError):
        await router.navigate(path)
    assert router.history == []
