"""
Data access for the chat widget: settings, keyword responses, chat sessions,
messages and the analytics summary.

Every method issues its query through the injected store and never raises.
Failures are logged and collapsed into a fallback value: ``None`` for single
rows, ``[]`` for lists, ``False`` for deletes, a zeroed structure for the
aggregates.
"""
import asyncio
import logging
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from . import schemas
from .config import ACTIVE_SESSION_STATUSES, ANALYTICS_PLACEHOLDERS, DEFAULT_WIDGET_SETTINGS
from .store import ErrorKind, Store, StoreResponse

logger = logging.getLogger(__name__)


def _one(response: StoreResponse, model, message: str):
    if not response.ok:
        logger.error("%s: %s", message, response.error)
        return None
    try:
        return model.model_validate(response.data)
    except ValidationError as exc:
        logger.error("%s: %s", message, exc)
        return None


def _many(response: StoreResponse, model, message: str) -> list:
    if not response.ok:
        logger.error("%s: %s", message, response.error)
        return []
    try:
        return [model.model_validate(row) for row in response.data]
    except ValidationError as exc:
        logger.error("%s: %s", message, exc)
        return []


def _values(record: BaseModel) -> dict:
    return record.model_dump(exclude_unset=True)


class DataAccessLayer:
    def __init__(self, store: Store, default_settings: Optional[dict] = None):
        self.store = store
        self.default_settings = dict(DEFAULT_WIDGET_SETTINGS if default_settings is None else default_settings)

    # Widget settings

    async def get_widget_settings(self, user_id: str) -> Optional[schemas.WidgetSettings]:
        """
        Return the owner's widget settings.

        An owner without settings gets ``default_settings`` inserted on the
        first call; later calls return that same row. When a concurrent call
        inserts first, the row it created is returned.
        """
        response = await self._select_settings(user_id)
        if response.not_found:
            logger.info("No widget settings for user %s, creating defaults", user_id)
            record = dict(self.default_settings, user_id=user_id)
            response = await self.store.table("widget_settings").insert(record).select().single().execute()
            if response.error is not None and response.error.kind is ErrorKind.CONSTRAINT_VIOLATION:
                logger.info("Widget settings for user %s were created concurrently", user_id)
                response = await self._select_settings(user_id)
                return _one(response, schemas.WidgetSettings, "Error fetching widget settings")
            return _one(response, schemas.WidgetSettings, "Error creating default widget settings")
        return _one(response, schemas.WidgetSettings, "Error fetching widget settings")

    def _select_settings(self, user_id: str):
        return self.store.table("widget_settings").select("*").eq("user_id", user_id).single().execute()

    async def update_widget_settings(self, settings: schemas.WidgetSettingsUpdate) -> Optional[schemas.WidgetSettings]:
        values = _values(settings)
        if not values.get("id"):
            values.pop("id", None)
            response = await self.store.table("widget_settings").insert(values).select().single().execute()
            return _one(response, schemas.WidgetSettings, "Error creating widget settings")

        response = await (
            self.store.table("widget_settings").update(values).eq("id", values["id"]).select().single().execute()
        )
        return _one(response, schemas.WidgetSettings, "Error updating widget settings")

    # Keyword responses

    async def get_keyword_responses(self, user_id: str) -> List[schemas.KeywordResponse]:
        response = await (
            self.store.table("keyword_responses")
            .select("*")
            .eq("user_id", user_id)
            .order("priority", desc=True)
            .order("created_at")
            .execute()
        )
        return _many(response, schemas.KeywordResponse, "Error fetching keyword responses")

    async def create_keyword_response(self, keyword_response: schemas.KeywordResponseCreate) -> Optional[schemas.KeywordResponse]:
        response = await (
            self.store.table("keyword_responses").insert(keyword_response.model_dump()).select().single().execute()
        )
        return _one(response, schemas.KeywordResponse, "Error creating keyword response")

    async def update_keyword_response(self, keyword_response: schemas.KeywordResponseUpdate) -> Optional[schemas.KeywordResponse]:
        values = _values(keyword_response)
        response = await (
            self.store.table("keyword_responses").update(values).eq("id", values["id"]).select().single().execute()
        )
        return _one(response, schemas.KeywordResponse, "Error updating keyword response")

    async def delete_keyword_response(self, keyword_response_id: str) -> bool:
        response = await (
            self.store.table("keyword_responses").delete().eq("id", keyword_response_id).select("id").single().execute()
        )
        if not response.ok:
            logger.error("Error deleting keyword response: %s", response.error)
            return False
        return True

    # Owners

    async def user_exists(self, user_id: str) -> bool:
        response = await self.store.table("users").select("id").eq("id", user_id).single().execute()
        if not response.ok:
            logger.error("Error fetching user: %s", response.error)
            return False
        return True

    # Chat sessions

    async def get_chat_sessions(self, user_id: str) -> List[schemas.ChatSession]:
        response = await (
            self.store.table("chat_sessions")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return _many(response, schemas.ChatSession, "Error fetching chat sessions")

    async def get_active_chat_sessions(self, user_id: str) -> List[schemas.ChatSession]:
        response = await (
            self.store.table("chat_sessions")
            .select("*")
            .eq("user_id", user_id)
            .in_("status", ACTIVE_SESSION_STATUSES)
            .order("created_at", desc=True)
            .execute()
        )
        return _many(response, schemas.ChatSession, "Error fetching active chat sessions")

    async def update_chat_session(self, session: schemas.ChatSessionUpdate) -> Optional[schemas.ChatSession]:
        values = _values(session)
        response = await (
            self.store.table("chat_sessions").update(values).eq("id", values["id"]).select().single().execute()
        )
        return _one(response, schemas.ChatSession, "Error updating chat session")

    async def create_chat_session(self, session: schemas.ChatSessionCreate) -> Optional[schemas.ChatSession]:
        response = await self.store.table("chat_sessions").insert(session.model_dump()).select().single().execute()
        return _one(response, schemas.ChatSession, "Error creating chat session")

    async def get_chat_session(self, session_id: str) -> Optional[schemas.ChatSession]:
        response = await self.store.table("chat_sessions").select("*").eq("id", session_id).single().execute()
        return _one(response, schemas.ChatSession, "Error fetching chat session")

    # Messages

    async def get_chat_session_messages(self, session_id: str) -> List[schemas.Message]:
        response = await (
            self.store.table("messages")
            .select("*")
            .eq("chat_session_id", session_id)
            .order("created_at")
            .execute()
        )
        return _many(response, schemas.Message, "Error fetching chat session messages")

    async def create_message(self, message: schemas.MessageCreate) -> Optional[schemas.Message]:
        response = await self.store.table("messages").insert(message.model_dump()).select().single().execute()
        return _one(response, schemas.Message, "Error creating message")

    # Aggregates

    async def get_analytics_data(self, user_id: str, time_range: str = "7d") -> schemas.AnalyticsData:
        """
        Count the owner's chats and messages.

        ``time_range`` is accepted for callers but not applied; all counts
        cover the owner's full history. Metrics without backing data are
        taken from ``ANALYTICS_PLACEHOLDERS``.
        """
        logger.debug("Computing analytics for user %s over %s", user_id, time_range)
        sessions = await self.store.table("chat_sessions").select("id").eq("user_id", user_id).execute()
        if not sessions.ok:
            logger.error("Error fetching analytics data: %s", sessions.error)
            return schemas.AnalyticsData()

        session_ids = [row["id"] for row in sessions.data]
        total_messages = 0
        if session_ids:
            messages = await self.store.table("messages").select("id").in_("chat_session_id", session_ids).execute()
            if not messages.ok:
                logger.error("Error fetching analytics data: %s", messages.error)
                return schemas.AnalyticsData()
            total_messages = len(messages.data)

        return schemas.AnalyticsData(
            total_chats=len(session_ids),
            total_messages=total_messages,
            **ANALYTICS_PLACEHOLDERS,
        )

    async def get_widget_data(self, user_id: str) -> schemas.WidgetData:
        """Public payload for the embedded widget: active settings and active keyword responses."""
        user = await self.store.table("users").select("id").eq("id", user_id).single().execute()
        if not user.ok:
            logger.error("Error fetching user: %s", user.error)
            return schemas.WidgetData()

        settings_query = (
            self.store.table("widget_settings")
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .single()
        )
        responses_query = (
            self.store.table("keyword_responses")
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .order("priority", desc=True)
            .order("created_at")
        )
        settings, keyword_responses = await asyncio.gather(settings_query.execute(), responses_query.execute())

        return schemas.WidgetData(
            settings=_one(settings, schemas.WidgetSettings, "Error fetching widget settings"),
            keyword_responses=_many(keyword_responses, schemas.KeywordResponse, "Error fetching keyword responses"),
        )
