"""Conversation engine: one questionnaire turn at a time.

The engine owns no transport.  Channels feed it raw text (or a shared
location) for a user id and deliver the returned :class:`Reply`
messages however they like: WhatsApp webhook, HTTP chat API, terminal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from saude_bot.config import CONVERSATION_FLOW, SESSION_IDLE_MINUTES
from saude_bot.conversation import messages as msg
from saude_bot.conversation.session import Session, SessionStore, UserProfile
from saude_bot.conversation.states import (
    FIELD_STEPS,
    FLOW_STEPS,
    Flow,
    Step,
    is_last_field_step,
    next_step,
)
from saude_bot.conversation.validation import VALIDATORS
from saude_bot.facilities.directory import find_service_point, has_neighborhoods
from saude_bot.facilities.formatting import format_facility, format_neighborhood_units
from saude_bot.facilities.geo import parse_lat_lon
from saude_bot.facilities.locator import FacilityLocator, LookupStatus, NearbyResult
from saude_bot.services.facilities_api import FacilitiesApiClient
from saude_bot.services.http_client import ExternalAPIError
from saude_bot.services.metrics import metrics

logger = logging.getLogger(__name__)


@dataclass
class Reply:
    """Outcome of one turn.

    ``completed`` is set on the turn that ran the flow's final lookup;
    ``profile`` then holds a copy of the data collected for that user.
    """

    messages: list[str] = field(default_factory=list)
    completed: bool = False
    profile: UserProfile | None = None

    @property
    def text(self) -> str:
        return "\n\n".join(self.messages)


class ConversationEngine:
    def __init__(
        self,
        flow: Flow | str | None = None,
        *,
        sessions: SessionStore | None = None,
        facilities_api: FacilitiesApiClient | None = None,
        locator: FacilityLocator | None = None,
    ):
        self.flow = Flow(flow or CONVERSATION_FLOW)
        self.sessions = sessions or SessionStore(SESSION_IDLE_MINUTES * 60)
        self._facilities_api = facilities_api
        self._locator = locator

    # Collaborators are created on first use so flows that never touch
    # an API do not need its configuration.

    @property
    def facilities_api(self) -> FacilitiesApiClient:
        if self._facilities_api is None:
            self._facilities_api = FacilitiesApiClient()
        return self._facilities_api

    @property
    def locator(self) -> FacilityLocator:
        if self._locator is None:
            self._locator = FacilityLocator()
        return self._locator

    # ── Public API ───────────────────────────────────────────────────

    def handle_text(self, user_id: str, text: str) -> Reply:
        """Advance *user_id*'s questionnaire with a text message."""
        text = text or ""
        session = self.sessions.get_or_create(user_id)
        with session.lock:
            if text.strip().lower() == msg.RESET_KEYWORD:
                logger.info("Session %s restarted by user", user_id)
                session.reset()
            return self._dispatch(session, text)

    def handle_location(self, user_id: str, latitude: float, longitude: float) -> Reply:
        """Handle a shared location; ignored unless the flow is waiting for one."""
        session = self.sessions.touch(user_id)
        if session is None:
            return Reply()
        with session.lock:
            if session.step is not Step.GET_LOCATION:
                logger.debug("Ignoring location from %s at step %s", user_id, session.step.value)
                return Reply()
            return self._locate(session, latitude, longitude)

    def reset(self, user_id: str) -> None:
        self.sessions.discard(user_id)

    # ── Step handling ────────────────────────────────────────────────

    def _dispatch(self, session: Session, text: str) -> Reply:
        step = session.step
        if step not in FLOW_STEPS[self.flow]:
            logger.error("Session %s is at step %s, unknown to flow %s",
                         session.user_id, step.value, self.flow.value)
            session.reset()
            return Reply([msg.UNKNOWN_STEP])

        if step is Step.START:
            first = next_step(self.flow, Step.START)
            session.step = first
            return Reply([msg.question(self.flow, first)])

        if step in FIELD_STEPS:
            return self._answer(session, step, text)

        if step is Step.GET_LOCATION:
            coords = parse_lat_lon(text)
            if coords:
                return self._locate(session, *coords)
            return Reply([msg.LOCATION_REMINDER])

        return Reply([msg.FINISHED])

    def _answer(self, session: Session, step: Step, text: str) -> Reply:
        field_name = FIELD_STEPS[step]
        error = VALIDATORS[field_name](text)
        if error:
            return Reply([error])

        value = text.strip()
        setattr(session.profile, field_name, int(value) if field_name == "age" else value)

        if is_last_field_step(self.flow, step):
            return self._complete(session)

        following = next_step(self.flow, step)
        if (
            following is Step.GET_BAIRRO
            and self.flow is Flow.CITY
            and not has_neighborhoods(session.profile.city)
        ):
            following = next_step(self.flow, following)
        session.step = following
        return Reply([msg.question(self.flow, following, session.profile.first_name)])

    def _complete(self, session: Session) -> Reply:
        if self.flow is Flow.NEIGHBORHOOD:
            return self._lookup_neighborhood(session)

        # Flow.CITY: the static table answers, then the session stays closed
        profile = session.profile
        point = find_service_point(profile.city, profile.neighborhood)
        session.step = Step.FINISHED
        metrics.record_event("Conversation/Completed", flow=self.flow.value)
        return Reply(
            [f"{msg.PROCESSING}\n\n{point}\n\n{msg.THANKS}"],
            completed=True,
            profile=replace(profile),
        )

    def _lookup_neighborhood(self, session: Session) -> Reply:
        neighborhood = session.profile.neighborhood
        try:
            units = self.facilities_api.list_by_neighborhood(neighborhood)
            text = format_neighborhood_units(units, neighborhood)
        except ExternalAPIError:
            logger.exception("Facilities lookup failed for neighborhood %r", neighborhood)
            text = msg.FACILITIES_UNAVAILABLE
        return self._finish(session, [text])

    def _locate(self, session: Session, latitude: float, longitude: float) -> Reply:
        session.profile.latitude = latitude
        session.profile.longitude = longitude
        logger.info("Location from %s: lat %s, lon %s", session.user_id, latitude, longitude)

        replies = [msg.LOCATION_RECEIVED]
        try:
            result = self.locator.nearest(latitude, longitude)
            if result.status is not LookupStatus.NO_REGION:
                text = _render_nearby(result)
        except ExternalAPIError:
            logger.exception("Nearest-facility lookup failed for %s", session.user_id)
            return self._location_failed(session, replies)
        except Exception:
            logger.exception("Unexpected error locating facilities for %s", session.user_id)
            return self._location_failed(session, replies)

        metrics.record_event("Conversation/NearbyLookup", status=result.status.value)
        if result.status is LookupStatus.NO_REGION:
            # Keep waiting so the user can share the location again
            replies.append(msg.REGION_NOT_FOUND)
            return Reply(replies)

        replies.append(text)
        return self._finish(session, replies)

    def _location_failed(self, session: Session, replies: list[str]) -> Reply:
        metrics.record_event("Conversation/NearbyLookup", status="error")
        replies.append(msg.LOCATION_ERROR)
        return self._finish(session, replies)

    def _finish(self, session: Session, replies: list[str]) -> Reply:
        profile = replace(session.profile)
        metrics.record_event("Conversation/Completed", flow=self.flow.value)
        session.reset()
        return Reply(replies, completed=True, profile=profile)


def _render_nearby(result: NearbyResult) -> str:
    region = result.region
    if result.status is LookupStatus.NO_DATA:
        return msg.NO_REGION_DATA.format(uf=region.state_code.upper())
    if result.status is LookupStatus.NONE_NEARBY:
        return msg.NONE_NEARBY

    if result.status is LookupStatus.FOUND:
        header = msg.NEAREST_HEADER.format(count=len(result.facilities))
    else:
        header = msg.CITY_FALLBACK_HEADER.format(city=region.city)
    body = "\n\n".join(format_facility(f.record, f.distance_km) for f in result.facilities)
    return f"{header}\n\n{body}\n\n{msg.ROAD_THANKS}"
