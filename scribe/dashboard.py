"""Headline numbers for the admin dashboard."""

from dataclasses import dataclass

from scribe.models import Plan

REVENUE_PACKAGE_ID = "pro"


@dataclass
class DashboardSummary:
    total_users: int
    premium_users: int
    log_entries: int
    feedback_entries: int
    estimated_revenue: float
    currency: str


def dashboard_summary(studio) -> DashboardSummary:
    """Read-only snapshot; estimated revenue assumes every premium user bought the pro package."""
    users = studio.identity.list_users()
    premium = sum(1 for u in users if u.plan == Plan.PREMIUM)
    config = studio.config.get()
    package = next((p for p in config.packages if p.id == REVENUE_PACKAGE_ID), None)
    return DashboardSummary(
        total_users=len(users),
        premium_users=premium,
        log_entries=len(studio.events),
        feedback_entries=len(studio.feedback.list_all()),
        estimated_revenue=premium * package.price if package else 0.0,
        currency=package.currency if package else "",
    )
