"""Pydantic models for Scribe API requests and responses."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from scribe.models import AppMode, DailyUsage, Message, Plan, Rating, StudioModel, UserRecord


# --- Auth ---

class SignUpRequest(StudioModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    name: str = Field(default="", max_length=255)


class SignInRequest(StudioModel):
    email: str
    password: str


class AdminSignInRequest(StudioModel):
    key: str = Field(..., min_length=1, max_length=255)


class AuthResponse(StudioModel):
    user: UserRecord
    token: str


class UpgradeRequest(StudioModel):
    plan: Plan = Plan.PREMIUM


# --- Conversation ---

class SendMessageRequest(StudioModel):
    content: str = Field(..., min_length=1, max_length=50000)
    mode: AppMode = AppMode.CHAT
    project_id: Optional[str] = None


class SendMessageResponse(StudioModel):
    project_id: Optional[str] = None
    message: Message
    daily_usage: Optional[DailyUsage] = None


class ProjectSummary(StudioModel):
    id: str
    name: str
    mode: AppMode
    message_count: int
    updated_at: int


# --- Prompt builder ---

class OptimizePromptRequest(StudioModel):
    input: str = Field(..., min_length=1, max_length=20000)
    kind: str = Field(default="Novel fiction", max_length=100)


class OptimizePromptResponse(StudioModel):
    prompt: str


class FeedbackRequest(StudioModel):
    original_input: str
    generated_prompt: str
    rating: Rating
    comment: Optional[str] = Field(None, max_length=2000)


# --- Admin ---

class DashboardResponse(StudioModel):
    total_users: int
    premium_users: int
    log_entries: int
    feedback_entries: int
    estimated_revenue: float
    currency: str
