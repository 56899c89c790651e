from fastapi import APIRouter, Depends, HTTPException, Form
from typing import List
from uuid import uuid4
import logging

from .. import models, schemas
from ..crud import DataAccessLayer
from ..database import SessionLocal
from ..keywords import match_keyword_response
from ..store import SqlAlchemyStore

logger = logging.getLogger(__name__)

router = APIRouter()

store = SqlAlchemyStore(SessionLocal, models.Base.metadata)


def get_dal() -> DataAccessLayer:
    return DataAccessLayer(store)


@router.get("/widget/{user_id}", response_model=schemas.WidgetData)
async def widget_data(user_id: str, dal: DataAccessLayer = Depends(get_dal)):
    return await dal.get_widget_data(user_id)


@router.post("/widget/{user_id}/chat", response_model=schemas.ChatSession)
async def start_chat(user_id: str, dal: DataAccessLayer = Depends(get_dal)):
    if not await dal.user_exists(user_id):
        raise HTTPException(status_code=404, detail="Widget not found")
    chat = await dal.create_chat_session(
        schemas.ChatSessionCreate(user_id=user_id, visitor_id=uuid4().hex)
    )
    if chat is None:
        raise HTTPException(status_code=503, detail="Could not start chat")
    return chat


@router.post("/chat/{chat_id}/message", response_model=List[schemas.Message])
async def send_message(
        chat_id: str,
        text: str = Form(None),
        dal: DataAccessLayer = Depends(get_dal)
):
    if not text or not text.strip():
        raise HTTPException(status_code=400, detail="Text is required")

    chat = await dal.get_chat_session(chat_id)
    if chat is None:
        raise HTTPException(status_code=404, detail="Chat not found")

    message = await dal.create_message(
        schemas.MessageCreate(chat_session_id=chat_id, sender="visitor", content=text.strip())
    )
    if message is None:
        raise HTTPException(status_code=503, detail="Could not store message")
    stored = [message]

    # Auto-reply from the owner's keyword responses
    matched = match_keyword_response(text, await dal.get_keyword_responses(chat.user_id))
    if matched is not None:
        reply = await dal.create_message(
            schemas.MessageCreate(chat_session_id=chat_id, sender="bot", content=matched.response)
        )
        if reply is not None:
            stored.append(reply)
        else:
            logger.warning("Keyword reply for chat %s was not stored", chat_id)
    return stored


@router.get("/chat/{chat_id}/messages", response_model=List[schemas.Message])
async def get_messages(chat_id: str, dal: DataAccessLayer = Depends(get_dal)):
    if await dal.get_chat_session(chat_id) is None:
        raise HTTPException(status_code=404, detail="Chat not found")
    return await dal.get_chat_session_messages(chat_id)
