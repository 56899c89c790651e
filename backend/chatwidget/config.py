# backend/chatwidget/config.py
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

origins = os.getenv("CORS_ORIGINS", "").split(",")
CORS_ORIGINS = [] if origins == [""] else origins

# Inserted for an owner the first time their settings are requested.
DEFAULT_WIDGET_SETTINGS = {
    "business_name": "My Business",
    "primary_color": "#4F46E5",
    "secondary_color": "#FFFFFF",
    "position": "bottom-right",
    "icon": "chat",
    "welcome_message": "Hi there! How can we help you today?",
    "is_active": True,
    "auto_open": False,
    "open_delay": 5,
    "hide_on_mobile": False,
}

# Metrics the store does not track yet; reported as-is by get_analytics_data.
ANALYTICS_PLACEHOLDERS = {
    "average_response_time": 8.5,
    "chat_duration": 4.2,
    "visitor_satisfaction": 92,
    "keyword_matches": {
        "pricing": 42,
        "support": 38,
        "features": 27,
        "account": 21,
        "billing": 18,
        "other": 34,
    },
}

ACTIVE_SESSION_STATUSES = ("active", "agent_assigned")
