"""Command dispatcher for inbound chat events."""

import logging
from dataclasses import dataclass, field

from calories_bot.domain.events import EventKind, InboundEvent
from calories_bot.domain.sessions import SessionRecord
from calories_bot.services import messages, sessions
from calories_bot.services.analysis import AnalysisRequest
from calories_bot.services.referrals import DEFAULT_REFERRAL_BASE_URL, referral_link
from calories_bot.services.registrations import RegistrationService
from calories_bot.services.sessions import Reply, SessionRepository, Transition
from calories_bot.telegram_commands import START_CALLBACK_DATA, BotCommand

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WelcomeCard:
    """Image and buttons attached to /start replies."""

    image_url: str
    link_text: str
    link_url: str

    def decorate(self, reply: Reply) -> Reply:
        return Reply(
            text=reply.text,
            photo=self.image_url,
            reply_markup={
                "inline_keyboard": [
                    [{"text": "⛏ Mine now", "callback_data": START_CALLBACK_DATA}],
                    [{"text": self.link_text, "url": self.link_url}],
                ]
            },
        )


@dataclass(frozen=True)
class BotOptions:
    """Behavior toggles that used to be separate bot variants."""

    require_registration: bool = True
    referral_base_url: str = DEFAULT_REFERRAL_BASE_URL
    welcome_card: WelcomeCard | None = None


@dataclass(frozen=True)
class Outcome:
    """Everything the transport has to do for one event."""

    chat_id: int
    user_id: int | None = None
    replies: tuple[Reply, ...] = ()
    analysis: AnalysisRequest | None = None


@dataclass
class CommandDispatcher:
    """Route events to handlers and apply the resulting transitions."""

    session_repository: SessionRepository
    registration_service: RegistrationService
    options: BotOptions = field(default_factory=BotOptions)

    def dispatch(self, event: InboundEvent) -> Outcome:
        """Handle one event and return the replies and side effects to perform."""
        if event.kind is EventKind.OTHER:
            return Outcome(chat_id=event.chat_id, user_id=event.user_id)
        if event.user_id is None:
            return Outcome(
                chat_id=event.chat_id,
                replies=(Reply(messages.UNIDENTIFIED_USER),),
            )

        user_id = event.user_id
        session = self.session_repository.get(user_id)
        transition = self._route(event, user_id, session)

        if transition.register_wallet is not None:
            self.registration_service.register(user_id, transition.register_wallet)
        if transition.session is not None:
            self.session_repository.save(transition.session)

        analysis = None
        if transition.analyze_photo is not None:
            analysis = AnalysisRequest(
                chat_id=event.chat_id,
                user_id=user_id,
                photo=transition.analyze_photo,
            )
        return Outcome(
            chat_id=event.chat_id,
            user_id=user_id,
            replies=transition.replies,
            analysis=analysis,
        )

    def _route(
        self, event: InboundEvent, user_id: int, session: SessionRecord | None
    ) -> Transition:
        if event.kind is EventKind.PHOTO:
            return sessions.on_photo(session, event.photos)

        command = BotCommand.from_name(event.command)
        if event.kind is EventKind.COMMAND and command is not None:
            return self._handle_command(command, event, user_id, session)
        return sessions.on_text(session, event.text or "")

    def _handle_command(
        self,
        command: BotCommand,
        event: InboundEvent,
        user_id: int,
        session: SessionRecord | None,
    ) -> Transition:
        registered = self.registration_service.is_registered(user_id)
        if command is BotCommand.START:
            if event.argument:
                logger.info(
                    "Start with payload",
                    extra={"user_id": user_id, "start_payload": event.argument},
                )
            transition = sessions.on_start(session, user_id, registered)
            return self._with_welcome_card(transition)
        if command is BotCommand.HELP:
            return Transition(replies=(Reply(messages.HELP),))
        if command is BotCommand.WALLET:
            return sessions.on_wallet(session, user_id)
        if command is BotCommand.SUBMIT:
            return sessions.on_submit(
                session,
                user_id,
                registered,
                require_registration=self.options.require_registration,
            )
        if self.options.require_registration and not registered:
            return Transition(replies=(Reply(messages.REGISTER_FIRST),))
        link = referral_link(user_id, self.options.referral_base_url)
        return Transition(replies=(Reply(messages.referral(link)),))

    def _with_welcome_card(self, transition: Transition) -> Transition:
        card = self.options.welcome_card
        if card is None:
            return transition
        return Transition(
            session=transition.session,
            replies=tuple(card.decorate(reply) for reply in transition.replies),
            register_wallet=transition.register_wallet,
            analyze_photo=transition.analyze_photo,
        )
