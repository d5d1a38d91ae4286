"""DialogueEngine implementation."""

from typing import Awaitable, Callable, Protocol

from ..errors import (
    DuplicateRecipient,
    ProfileNotFound,
    TransportError,
    UnknownCategory,
    ValidationError,
)
from ..locks import KeyedLock
from ..logging_config import get_logger
from ..models import (
    EDIT_STATES,
    DialogueStateName,
    Profile,
    ProfileUpdate,
    Session,
)
from ..storage import IProfileRepository
from ..transport import ITransport
from . import texts
from .parsing import parse_categories, parse_events_interval, parse_notification_time

logger = get_logger(__name__)

CANCEL_COMMAND = "cancel"

StateHandler = Callable[[Session, str], Awaitable[list[str]]]


def parse_command(text: str | None) -> tuple[str, str] | None:
    """Split ``/name argument`` into (name, argument); None for plain text.

    A ``@botname`` suffix on the command name is dropped.
    """
    if not text:
        return None
    stripped = text.strip()
    if not stripped.startswith("/") or len(stripped) == 1:
        return None

    head, _, argument = stripped[1:].partition(" ")
    name = head.split("@", 1)[0].lower()
    return name, argument.strip()


class IDialogueEngine(Protocol):
    """Managing registration and edit conversations."""

    async def handle_message(self, recipient_id: str, text: str | None) -> list[str]:
        """Accept a message, advance the session, send and return replies."""
        ...

    async def handle_command(
        self, recipient_id: str, command: str, argument: str = ""
    ) -> list[str]:
        """Execute a command, send and return replies."""
        ...

    async def start(self) -> None:
        """Start accepting messages."""
        ...

    async def stop(self) -> None:
        """Drop sessions, stop accepting messages."""
        ...


class DialogueEngine:
    """Per-recipient state machine building and editing profiles."""

    def __init__(self, repository: IProfileRepository, transport: ITransport):
        self._repository = repository
        self._transport = transport

        # In-memory storage
        self._sessions: dict[str, Session] = {}
        self._locks = KeyedLock()
        self._running = False

        self._handlers: dict[DialogueStateName, StateHandler] = {
            DialogueStateName.AWAIT_CITY: self._receive_city,
            DialogueStateName.AWAIT_CATEGORIES: self._receive_categories,
            DialogueStateName.AWAIT_NOTIFICATION_TIME: self._receive_notification_time,
            DialogueStateName.AWAIT_EVENTS_INTERVAL: self._receive_events_interval,
            DialogueStateName.AWAIT_EDIT_CITY: self._receive_edit_city,
            DialogueStateName.AWAIT_EDIT_CATEGORIES: self._receive_edit_categories,
            DialogueStateName.AWAIT_EDIT_NOTIFICATION_TIME: self._receive_edit_notification_time,
            DialogueStateName.AWAIT_EDIT_EVENTS_INTERVAL: self._receive_edit_events_interval,
        }
        self._reprompts: dict[DialogueStateName, str] = {
            DialogueStateName.START: texts.help_text(),
            DialogueStateName.AWAIT_CITY: texts.ASK_CITY,
            DialogueStateName.AWAIT_CATEGORIES: texts.ASK_CATEGORIES,
            DialogueStateName.AWAIT_NOTIFICATION_TIME: texts.ASK_NOTIFICATION_TIME,
            DialogueStateName.AWAIT_EVENTS_INTERVAL: texts.ASK_EVENTS_INTERVAL,
            DialogueStateName.AWAIT_EDIT_CITY: texts.ASK_EDIT["city"],
            DialogueStateName.AWAIT_EDIT_CATEGORIES: texts.ASK_EDIT["categories"],
            DialogueStateName.AWAIT_EDIT_NOTIFICATION_TIME: texts.ASK_EDIT["notification_time"],
            DialogueStateName.AWAIT_EDIT_EVENTS_INTERVAL: texts.ASK_EDIT["events_interval"],
        }

    async def start(self) -> None:
        """Start accepting messages."""
        logger.info("Starting DialogueEngine")
        self._running = True

    async def stop(self) -> None:
        """Drop sessions, stop accepting messages."""
        logger.info("Stopping DialogueEngine")
        self._running = False
        self._sessions.clear()

    def reset(self) -> None:
        """Forget every open session."""
        self._sessions.clear()

    def session_state(self, recipient_id: str) -> DialogueStateName:
        """Current state of a recipient's conversation."""
        session = self._sessions.get(recipient_id)
        return session.state if session else DialogueStateName.START

    async def handle_message(self, recipient_id: str, text: str | None) -> list[str]:
        """Accept a message, advance the session, send and return replies."""
        command = parse_command(text)
        if command is not None:
            return await self.handle_command(recipient_id, *command)

        if not self._running:
            raise RuntimeError("DialogueEngine not started")

        async with self._locks(recipient_id):
            replies = await self._handle_text(recipient_id, text)
            await self._deliver(recipient_id, replies)
        return replies

    async def handle_command(
        self, recipient_id: str, command: str, argument: str = ""
    ) -> list[str]:
        """Execute a command, send and return replies."""
        if not self._running:
            raise RuntimeError("DialogueEngine not started")

        logger.info(
            "Command /%s from %s", command, recipient_id, extra={"recipient_id": recipient_id}
        )

        async with self._locks(recipient_id):
            replies = await self._dispatch_command(recipient_id, command, argument)
            await self._deliver(recipient_id, replies)
        return replies

    async def _deliver(self, recipient_id: str, replies: list[str]) -> None:
        for reply in replies:
            try:
                await self._transport.send(recipient_id, reply)
            except TransportError as e:
                logger.error("Reply to %s not delivered: %s", recipient_id, e)

    def _end_session(self, recipient_id: str) -> None:
        self._sessions.pop(recipient_id, None)

    # Commands

    async def _dispatch_command(
        self, recipient_id: str, command: str, argument: str
    ) -> list[str]:
        state = self.session_state(recipient_id)

        if command == CANCEL_COMMAND:
            self._end_session(recipient_id)
            logger.info("Session of %s cancelled in state %s", recipient_id, state.value)
            return [texts.CANCELLED]

        if command == "help":
            return [texts.help_text()]

        if command == "info":
            profile = await self._repository.find_by_recipient(recipient_id)
            return [texts.profile_summary(profile) if profile else texts.NO_PROFILE]

        if command in ("start", "edit") and state != DialogueStateName.START:
            return [texts.FINISH_FIRST]

        if command == "start":
            return await self._cmd_start(recipient_id)

        if command == "edit":
            return await self._cmd_edit(recipient_id, argument)

        return [texts.unknown_command(command)]

    async def _cmd_start(self, recipient_id: str) -> list[str]:
        profile = await self._repository.find_by_recipient(recipient_id)
        if profile is not None:
            return [texts.profile_summary(profile)]

        self._sessions[recipient_id] = Session(
            recipient_id=recipient_id, state=DialogueStateName.AWAIT_CITY
        )
        logger.info("Onboarding started for %s", recipient_id)
        return [texts.ASK_CITY]

    async def _cmd_edit(self, recipient_id: str, argument: str) -> list[str]:
        parameter = argument.strip()
        state = EDIT_STATES.get(parameter)
        if state is None:
            return [texts.unknown_parameter(parameter)]

        profile = await self._repository.find_by_recipient(recipient_id)
        if profile is None:
            logger.warning("Edit of %s requested by %s without a profile", parameter, recipient_id)
            return [texts.NO_PROFILE]

        self._sessions[recipient_id] = Session(recipient_id=recipient_id, state=state)
        return [texts.ASK_EDIT[parameter]]

    # Text input

    async def _handle_text(self, recipient_id: str, text: str | None) -> list[str]:
        session = self._sessions.get(recipient_id)
        state = session.state if session else DialogueStateName.START

        if text is None or not text.strip():
            return [self._reprompts[state]]

        # Plain text outside a conversation behaves like /start
        if session is None:
            return await self._cmd_start(recipient_id)

        return await self._handlers[state](session, text)

    async def _receive_city(self, session: Session, text: str) -> list[str]:
        session.city = text
        session.state = DialogueStateName.AWAIT_CATEGORIES
        return [texts.ASK_CATEGORIES]

    async def _receive_categories(self, session: Session, text: str) -> list[str]:
        try:
            session.categories = parse_categories(text)
        except UnknownCategory as e:
            return [texts.unknown_category(e.token)]

        session.state = DialogueStateName.AWAIT_NOTIFICATION_TIME
        return [texts.ASK_NOTIFICATION_TIME]

    async def _receive_notification_time(self, session: Session, text: str) -> list[str]:
        try:
            session.notification_time = parse_notification_time(text)
        except ValidationError:
            return [texts.ASK_NOTIFICATION_TIME]

        session.state = DialogueStateName.AWAIT_EVENTS_INTERVAL
        return [texts.ASK_EVENTS_INTERVAL]

    async def _receive_events_interval(self, session: Session, text: str) -> list[str]:
        try:
            events_interval = parse_events_interval(text)
        except ValidationError:
            return [texts.ASK_EVENTS_INTERVAL]

        profile = Profile(
            recipient_id=session.recipient_id,
            city=session.city,
            categories=list(session.categories),
            notification_time=session.notification_time,
            events_interval=events_interval,
        )
        self._end_session(session.recipient_id)

        try:
            await self._repository.create(profile)
        except DuplicateRecipient:
            logger.error(
                "Onboarding finished for %s who already has a profile",
                session.recipient_id,
                exc_info=True,
            )
            return [texts.ALREADY_REGISTERED]

        logger.info("Onboarding completed for %s", session.recipient_id)
        return [texts.profile_summary(profile)]

    async def _receive_edit_city(self, session: Session, text: str) -> list[str]:
        return await self._apply_edit(session, ProfileUpdate(city=text))

    async def _receive_edit_categories(self, session: Session, text: str) -> list[str]:
        try:
            categories = parse_categories(text)
        except UnknownCategory as e:
            return [texts.unknown_category(e.token)]
        return await self._apply_edit(session, ProfileUpdate(categories=categories))

    async def _receive_edit_notification_time(
        self, session: Session, text: str
    ) -> list[str]:
        try:
            notification_time = parse_notification_time(text)
        except ValidationError:
            return [texts.ASK_NOTIFICATION_TIME]
        return await self._apply_edit(
            session, ProfileUpdate(notification_time=notification_time)
        )

    async def _receive_edit_events_interval(
        self, session: Session, text: str
    ) -> list[str]:
        try:
            events_interval = parse_events_interval(text)
        except ValidationError:
            return [texts.ASK_EVENTS_INTERVAL]
        return await self._apply_edit(
            session, ProfileUpdate(events_interval=events_interval)
        )

    async def _apply_edit(self, session: Session, changes: ProfileUpdate) -> list[str]:
        self._end_session(session.recipient_id)

        try:
            profile = await self._repository.update(session.recipient_id, changes)
        except ProfileNotFound:
            logger.error(
                "Edit for %s failed: profile disappeared", session.recipient_id
            )
            return [texts.NO_PROFILE]

        logger.info("Profile of %s edited in state %s", session.recipient_id, session.state.value)
        return [f"{texts.UPDATED}\n{texts.profile_summary(profile)}"]
