# backend/chatwidget/models.py
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from .database import Base


def new_id():
    return uuid4().hex


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

class WidgetSettings(Base):
    __tablename__ = "widget_settings"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    business_name = Column(String)
    primary_color = Column(String)
    secondary_color = Column(String)
    position = Column(String, default="bottom-right")
    icon = Column(String)
    welcome_message = Column(Text)
    is_active = Column(Boolean, default=True)
    auto_open = Column(Boolean, default=False)
    open_delay = Column(Integer, default=0)
    hide_on_mobile = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class KeywordResponse(Base):
    __tablename__ = "keyword_responses"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    keywords = Column(JSON, default=list)
    response = Column(Text, nullable=False)
    priority = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class ChatSession(Base):
    __tablename__ = "chat_sessions"
    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    visitor_id = Column(String, index=True)
    visitor_name = Column(String, nullable=True)
    status = Column(String, default="active")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class Message(Base):
    __tablename__ = "messages"
    id = Column(String, primary_key=True, default=new_id)
    chat_session_id = Column(String, ForeignKey("chat_sessions.id"), nullable=False, index=True)
    sender = Column(String)
    content = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
