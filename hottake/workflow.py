"""Session workflow: browse, select, confirm, join, in-session controls, leave."""

import enum
import logging
from dataclasses import dataclass, field

from hottake.app_state import TOPIC_CURRENT_USER, AppState
from hottake.directory import DebatesService
from hottake.errors import NetworkError, NotFoundError, WorkflowError
from hottake.models import Debate, Participant, Profile, SessionState
from hottake.navigation import HOME, Navigator, debate_path

logger = logging.getLogger(__name__)

LOAD_DEBATES_ERROR = "Failed to load debates. Please try again later."
LOAD_DEBATE_ERROR = "Failed to load debate. Please try again later."
DEBATE_NOT_FOUND_ERROR = "This debate no longer exists."


class Phase(enum.Enum):
    BROWSING = "browsing"
    SELECTED = "selected"
    CONFIRMED = "confirmed"    # navigation requested, debate being fetched
    IN_SESSION = "in_session"
    ERRORED = "errored"
    LEFT = "left"


@dataclass(frozen=True)
class ConfirmationPrompt:
    title: str
    participant_count: int


class ClickTarget(enum.Enum):
    OVERLAY = "overlay"
    CONTENT = "content"
    CLOSE_BUTTON = "close_button"


# innermost first: a click bubbles outward until something stops it
_BUBBLE_PATHS = {
    ClickTarget.CLOSE_BUTTON: (ClickTarget.CLOSE_BUTTON, ClickTarget.CONTENT, ClickTarget.OVERLAY),
    ClickTarget.CONTENT: (ClickTarget.CONTENT, ClickTarget.OVERLAY),
    ClickTarget.OVERLAY: (ClickTarget.OVERLAY,),
}


@dataclass
class ClickEvent:
    target: ClickTarget
    propagation_stopped: bool = False
    handled_by: list[ClickTarget] = field(default_factory=list)

    def stop_propagation(self) -> None:
        self.propagation_stopped = True


def _roster_order(participant: Participant) -> tuple[str, str]:
    return (participant.name.lower(), participant.id)


class SessionWorkflow:
    """Drives one client through the debate directory and into a session.

    Debate fetches are keyed by a request sequence number; a response is
    applied only if no newer fetch or navigation happened while it was in
    flight, so a slow response for a stale id never overwrites state.
    """

    def __init__(self, service: DebatesService, state: AppState, navigator: Navigator) -> None:
        self._service = service
        self._state = state
        self._navigator = navigator

        self.phase = Phase.BROWSING
        self.session = SessionState()
        self.debate: Debate | None = None
        self.roster: list[Participant] = []
        self.requested_debate_id: str | None = None
        self.is_loading = False
        self.error = ""

        self._request_seq = 0
        self.me: Profile = state.user_snapshot()
        self._unsubscribe = state.subscribe(TOPIC_CURRENT_USER, self._on_user_changed)

    def _on_user_changed(self, profile: Profile) -> None:
        self.me = profile

    def close(self) -> None:
        self._unsubscribe()

    @property
    def debates(self) -> tuple[Debate, ...]:
        return self._state.debates

    def _require(self, *phases: Phase) -> None:
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise WorkflowError(f"Action requires phase {allowed}, current phase is {self.phase.value}")

    # --- browsing ---------------------------------------------------------

    def _invalidate_fetch(self) -> None:
        """Drop the current debate and orphan any fetch still in flight."""
        self._request_seq += 1
        self.session = SessionState()
        self.debate = None
        self.roster = []
        self.requested_debate_id = None
        self.is_loading = False
        self.error = ""

    async def enter_browse(self, refresh: bool = True) -> None:
        """Show the directory: reset to BROWSING and (re)load the debate list."""
        self._invalidate_fetch()
        self.phase = Phase.BROWSING
        if refresh:
            await self.load_debates()

    async def load_debates(self) -> None:
        self.is_loading = True
        self.error = ""
        try:
            await self._service.list_debates()
        except NetworkError as exc:
            logger.warning("Failed to fetch debates: %s", exc)
            self.error = LOAD_DEBATES_ERROR
        finally:
            self.is_loading = False

    def select(self, debate: Debate) -> ConfirmationPrompt:
        """Pick a debate and open the join confirmation."""
        self._require(Phase.BROWSING, Phase.SELECTED)
        self.session.selected_debate = debate
        self.session.modal_open = True
        self.phase = Phase.SELECTED
        return ConfirmationPrompt(title=debate.title, participant_count=debate.participant_count)

    def cancel(self) -> None:
        """Dismiss the confirmation and drop the selection. No side effects."""
        self._require(Phase.SELECTED)
        self.session.modal_open = False
        self.session.selected_debate = None
        self.phase = Phase.BROWSING

    async def confirm(self) -> None:
        """Join the selected debate by navigating to its session path."""
        self._require(Phase.SELECTED)
        selected = self.session.selected_debate
        if selected is None:
            raise WorkflowError("No debate selected")
        logger.info("Joining debate %s (%s)", selected.id, selected.title)
        self.session.modal_open = False
        self.phase = Phase.CONFIRMED
        await self._navigator.navigate(debate_path(selected.id))

    # --- session ----------------------------------------------------------

    async def open_session(self, debate_id: str) -> None:
        """Enter the session view for ``debate_id`` and fetch the debate.

        Reachable directly by path, without going through selection.
        """
        self._request_seq += 1
        seq = self._request_seq

        self.phase = Phase.CONFIRMED
        self.session = SessionState()
        self.debate = None
        self.roster = []
        self.requested_debate_id = debate_id
        self.is_loading = True
        self.error = ""
        try:
            debate = await self._service.get_debate(debate_id)
        except NotFoundError as exc:
            if seq == self._request_seq:
                logger.warning("Debate %s not found: %s", debate_id, exc)
                self.error = DEBATE_NOT_FOUND_ERROR
                self.phase = Phase.ERRORED
        except NetworkError as exc:
            if seq == self._request_seq:
                logger.warning("Failed to get debate %s: %s", debate_id, exc)
                self.error = LOAD_DEBATE_ERROR
                self.phase = Phase.ERRORED
        else:
            if seq == self._request_seq:
                self.debate = debate
                self.roster = sorted(debate.participants, key=_roster_order)
                self.phase = Phase.IN_SESSION
            else:
                logger.debug("Discarding stale response for debate %s", debate_id)
        finally:
            if seq == self._request_seq:
                self.is_loading = False

    def toggle_mute(self) -> bool:
        self._require(Phase.IN_SESSION)
        self.session.is_muted = not self.session.is_muted
        return self.session.is_muted

    def toggle_video(self) -> bool:
        self._require(Phase.IN_SESSION)
        self.session.is_video_on = not self.session.is_video_on
        return self.session.is_video_on

    def open_fullscreen(self, participant: Participant) -> None:
        self._require(Phase.IN_SESSION)
        self.session.focused_participant = participant

    def close_fullscreen(self) -> None:
        self.session.focused_participant = None

    def click_fullscreen(self, target: ClickTarget) -> ClickEvent:
        """Deliver a click inside the fullscreen overlay.

        The close button and the bare overlay close the view. The content
        area stops propagation, so clicks on it never reach the overlay.
        """
        event = ClickEvent(target=target)
        if self.session.focused_participant is None:
            return event

        handlers = {
            ClickTarget.CLOSE_BUTTON: lambda e: self.close_fullscreen(),
            ClickTarget.CONTENT: lambda e: e.stop_propagation(),
            ClickTarget.OVERLAY: lambda e: self.close_fullscreen(),
        }
        for node in _BUBBLE_PATHS[target]:
            handlers[node](event)
            event.handled_by.append(node)
            if event.propagation_stopped:
                break
        return event

    async def leave(self) -> None:
        """Drop all session state and go back to the directory."""
        self._require(Phase.IN_SESSION, Phase.ERRORED, Phase.CONFIRMED)
        self._invalidate_fetch()
        self.phase = Phase.LEFT
        await self._navigator.navigate(HOME)
