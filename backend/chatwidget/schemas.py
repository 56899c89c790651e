from pydantic import BaseModel, Field, NonNegativeInt
from typing import Optional, List, Dict
from datetime import datetime

class WidgetSettingsBase(BaseModel):
    business_name: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    position: Optional[str] = None
    icon: Optional[str] = None
    welcome_message: Optional[str] = None
    is_active: Optional[bool] = None
    auto_open: Optional[bool] = None
    open_delay: Optional[NonNegativeInt] = None
    hide_on_mobile: Optional[bool] = None

class WidgetSettingsUpdate(WidgetSettingsBase):
    # no id means the record is inserted
    id: Optional[str] = None
    user_id: Optional[str] = None

class WidgetSettings(WidgetSettingsBase):
    id: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class KeywordResponseCreate(BaseModel):
    user_id: str
    keywords: List[str] = Field(default_factory=list)
    response: str
    priority: int = 0
    is_active: bool = True

class KeywordResponseUpdate(BaseModel):
    id: str
    keywords: Optional[List[str]] = None
    response: Optional[str] = None
    priority: Optional[int] = None
    is_active: Optional[bool] = None

class KeywordResponse(BaseModel):
    id: str
    user_id: str
    keywords: List[str] = Field(default_factory=list)
    response: str
    priority: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ChatSessionCreate(BaseModel):
    user_id: str
    visitor_id: Optional[str] = None
    visitor_name: Optional[str] = None
    status: str = "active"

class ChatSessionUpdate(BaseModel):
    id: str
    visitor_name: Optional[str] = None
    status: Optional[str] = None

class ChatSession(BaseModel):
    id: str
    user_id: str
    visitor_id: Optional[str] = None
    visitor_name: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class MessageCreate(BaseModel):
    chat_session_id: str
    sender: str
    content: Optional[str] = None

class Message(BaseModel):
    id: str
    chat_session_id: str
    sender: str
    content: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AnalyticsData(BaseModel):
    total_chats: int = 0
    total_messages: int = 0
    average_response_time: float = 0
    chat_duration: float = 0
    visitor_satisfaction: float = 0
    keyword_matches: Dict[str, int] = Field(default_factory=dict)

class WidgetData(BaseModel):
    settings: Optional[WidgetSettings] = None
    keyword_responses: List[KeywordResponse] = Field(default_factory=list, alias="keywordResponses")

    class Config:
        populate_by_name = True
