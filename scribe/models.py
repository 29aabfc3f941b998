"""Pydantic records for every Scribe table.

Attributes are snake_case; documents are written with camelCase keys, which is
the persisted and backup interchange format.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def calendar_day(moment: datetime) -> str:
    return moment.date().isoformat()


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


# --- Enums ---

class Plan(str, Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"


class AppMode(str, Enum):
    BOOK = "BOOK"
    SCRIPT = "SCRIPT"
    CHAT = "CHAT"


class Role(str, Enum):
    USER = "user"
    MODEL = "model"


class LogType(str, Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


class Rating(str, Enum):
    UP = "up"
    DOWN = "down"


class StudioModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Serialize to the persisted camelCase shape, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# --- Users ---

class DailyUsage(StudioModel):
    count: int = Field(0, ge=0)
    date: str


class UserRecord(StudioModel):
    id: str
    email: str
    name: str
    credential_hash: Optional[str] = None
    plan: Plan = Plan.FREE
    is_admin: bool = False
    registered_at: Optional[int] = None
    daily_usage: Optional[DailyUsage] = None
    avatar: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_password(cls, data):
        # Older documents kept the encoded credential under "password".
        if isinstance(data, dict) and "password" in data and not data.get("credentialHash"):
            data = dict(data)
            data["credentialHash"] = data.pop("password")
        return data


# --- Projects ---

class Message(StudioModel):
    role: Role
    text: str
    timestamp: int


class ProjectRecord(StudioModel):
    id: str
    user_id: str
    name: str
    mode: AppMode
    messages: list[Message] = Field(default_factory=list)
    updated_at: int


# --- Logs & feedback ---

class SystemLogEntry(StudioModel):
    id: str
    type: LogType
    message: str
    timestamp: int
    user_id: Optional[str] = None


class PromptFeedback(StudioModel):
    id: str
    user_id: str
    original_input: str
    generated_prompt: str
    rating: Rating
    comment: Optional[str] = None
    timestamp: int


# --- Configuration ---

class SystemPrompts(StudioModel):
    book: str
    script: str
    chat: str


class AdConfig(StudioModel):
    is_enabled: bool
    left_ad_slots: list[str]  # 6 HTML fragments
    right_ad_slots: list[str]  # 6 HTML fragments
    mobile_ad_slots: list[str]  # 3 HTML fragments (top, middle, bottom)


class ShopierConfig(StudioModel):
    api_key: str = ""
    api_secret: str = ""
    website_index: str = "1"
    is_enabled: bool = True


class GoogleAuthConfig(StudioModel):
    client_id: str = ""
    is_enabled: bool = True


class PaymentPackage(StudioModel):
    id: str
    name: str
    price: float
    currency: str
    features: list[str] = Field(default_factory=list)
    is_popular: bool = False


class AppConfig(StudioModel):
    schema_version: int = 1
    free_daily_limit: int
    maintenance_mode: bool
    system_prompts: SystemPrompts
    ad_config: AdConfig
    shopier_config: ShopierConfig
    google_auth_config: GoogleAuthConfig
    packages: list[PaymentPackage]

    def prompt_for(self, mode: AppMode) -> str:
        if mode == AppMode.BOOK:
            return self.system_prompts.book
        if mode == AppMode.SCRIPT:
            return self.system_prompts.script
        return self.system_prompts.chat
