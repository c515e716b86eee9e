"""Path-based navigation between views."""

import logging
import re
from collections.abc import Awaitable, Callable
from typing import Protocol

logger = logging.getLogger(__name__)

HOME = "/"
PROFILE = "/profile"
CREATE_DEBATE = "/create-debate"
DEBATE_TEMPLATE = "/debate/{debate_id}"

RouteHandler = Callable[..., Awaitable[None]]

_PARAM = re.compile(r"\{(\w+)\}")


def debate_path(debate_id: str) -> str:
    return DEBATE_TEMPLATE.format(debate_id=debate_id)


class Navigator(Protocol):
    async def navigate(self, path: str) -> None:
        ...


def _compile(template: str) -> re.Pattern[str]:
    parts = _PARAM.split(template)
    # split() alternates literal text and parameter names
    pattern = "".join(
        re.escape(part) if i % 2 == 0 else f"(?P<{part}>[^/]+)"
        for i, part in enumerate(parts)
    )
    return re.compile(f"^{pattern}$")


class Router:
    """Dispatch paths like ``/debate/42`` to registered async handlers."""

    def __init__(self) -> None:
        self._routes: list[tuple[str, re.Pattern[str], RouteHandler]] = []
        self.history: list[str] = []

    @property
    def current_path(self) -> str | None:
        return self.history[-1] if self.history else None

    def add_route(self, template: str, handler: RouteHandler) -> None:
        self._routes.append((template, _compile(template), handler))

    def resolve(self, path: str) -> tuple[RouteHandler, dict[str, str]]:
        for _template, pattern, handler in self._routes:
            match = pattern.match(path)
            if match:
                return handler, match.groupdict()
        raise LookupError(f"No route for path: {path}")

    async def navigate(self, path: str) -> None:
        handler, params = self.resolve(path)
        self.history.append(path)
        logger.debug("Navigate to %s", path)
        await handler(**params)
