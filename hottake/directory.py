"""Debate directory client: list, fetch, create and delete debates over HTTP."""

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from hottake.app_state import AppState
from hottake.errors import NetworkError, NotFoundError, ValidationError
from hottake.models import GENDERS, Debate, DebateDraft, Participant
from hottake.validation import DEFAULT_TITLE_MAX_LEN, validate_title

logger = logging.getLogger(__name__)

# epoch values above this are milliseconds (JavaScript Date.now())
_MILLIS_THRESHOLD = 1e11


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = value / 1000 if abs(value) > _MILLIS_THRESHOLD else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.debug("Out of range timestamp %r", value)
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp %r", value)
    return None


def _optional_age(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _optional_gender(value: Any) -> str | None:
    if isinstance(value, str) and value.lower() in GENDERS:
        return value.lower()
    return None


def _participant_from(key: Any, value: Any) -> Participant:
    if isinstance(value, Mapping):
        pid = value.get("id", key)
        return Participant(
            id=str(pid),
            name=str(value.get("name") or ""),
            age=_optional_age(value.get("age")),
            gender=_optional_gender(value.get("gender")),
        )
    return Participant(id=str(key))


def participants_from_record(raw: Any) -> frozenset[Participant]:
    """Map the wire participant collection to a set of participants.

    Accepts an object keyed by participant id, a list of ids, or a list of
    participant objects. Anything else, including a missing field, is empty.
    """
    if isinstance(raw, Mapping):
        return frozenset(_participant_from(key, value) for key, value in raw.items())
    if isinstance(raw, list):
        participants = set()
        for item in raw:
            if isinstance(item, Mapping):
                if item.get("id") is None:
                    continue
                participants.add(_participant_from(item["id"], item))
            elif isinstance(item, (str, int)):
                participants.add(Participant(id=str(item)))
        return frozenset(participants)
    return frozenset()


def debate_from_record(record: Any) -> Debate:
    """Build a Debate from one wire record. Only ``id`` is required.

    Raises:
        ValueError: If the record is not an object or has no id.
    """
    if not isinstance(record, Mapping):
        raise ValueError(f"Expected a debate object, got {type(record).__name__}")
    if record.get("id") is None:
        raise ValueError("Debate record has no id")

    owner_id = record.get("owner_id", record.get("ownerId"))
    return Debate(
        id=str(record["id"]),
        title=str(record.get("title") or ""),
        owner_id=str(owner_id) if owner_id is not None else None,
        created_at=_parse_timestamp(record.get("created_at", record.get("createdAt"))),
        participants=participants_from_record(record.get("participants")),
    )


class DebatesService:
    """Async client for the remote debate API.

    Every call raises NetworkError when the transport fails or the status is
    not a success; the body is only parsed after a successful status.
    """

    def __init__(
        self,
        base_url: str,
        state: AppState,
        timeout_sec: float = 10.0,
        title_max_len: int = DEFAULT_TITLE_MAX_LEN,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._state = state
        self._title_max_len = title_max_len
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_sec)

    async def __aenter__(self) -> "DebatesService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(operation, f"Request failed: {exc}") from exc

        if response.is_success:
            return response

        logger.warning("%s %s returned HTTP %d", method, path, response.status_code)
        if response.status_code == 404:
            raise NotFoundError(operation, f"Not found: {path}", response.status_code)
        raise NetworkError(operation, f"HTTP {response.status_code}", response.status_code)

    @staticmethod
    def _json(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(operation, f"Invalid JSON body: {exc}", response.status_code) from exc

    @staticmethod
    def _to_debate(operation: str, record: Any) -> Debate:
        try:
            return debate_from_record(record)
        except ValueError as exc:
            raise NetworkError(operation, f"Malformed debate record: {exc}") from exc

    @staticmethod
    def _debate_path(debate_id: str) -> str:
        return f"/debates/{quote(str(debate_id), safe='')}"

    async def list_debates(self) -> list[Debate]:
        """Fetch all debates in server order and refresh the shared cache."""
        response = await self._request("list_debates", "GET", "/debates")
        data = self._json("list_debates", response)
        if not isinstance(data, list):
            raise NetworkError("list_debates", f"Expected a list, got {type(data).__name__}")

        debates = [self._to_debate("list_debates", record) for record in data]
        self._state.set_debates(debates)
        logger.info("Loaded %d debates", len(debates))
        return debates

    async def get_debate(self, debate_id: str) -> Debate:
        """Fetch one debate.

        Raises:
            NotFoundError: If the server reports the id does not exist.
            NetworkError: On any other failure.
        """
        response = await self._request("get_debate", "GET", self._debate_path(debate_id))
        return self._to_debate("get_debate", self._json("get_debate", response))

    async def create_debate(self, draft: DebateDraft) -> Debate:
        """Create a debate owned by the current profile.

        Raises:
            ValidationError: If the title is invalid or the profile has never
                been saved. Raised before any network call.
            NetworkError: If the server rejects the request.
        """
        title = validate_title(draft.title, self._title_max_len)
        owner = self._state.user_snapshot()
        if owner.id is None:
            raise ValidationError("ownerId", "Save your profile before creating a debate")

        payload = {
            "title": title,
            "ownerId": owner.id,
            "ownerName": owner.name,
            "ownerAge": owner.age,
            "ownerGender": owner.gender,
        }
        response = await self._request("create_debate", "POST", "/debates", json=payload)
        debate = self._to_debate("create_debate", self._json("create_debate", response))
        logger.info("Created debate %s (%s)", debate.id, debate.title)
        return debate

    async def delete_debate(self, debate_id: str) -> bool:
        """Delete a debate. Returns True on success, raises on an error status."""
        response = await self._request("delete_debate", "DELETE", self._debate_path(debate_id))
        logger.info("Deleted debate %s", debate_id)
        return response.is_success
