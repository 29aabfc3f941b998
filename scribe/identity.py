"""Identity & session management: user table, sign-in flows, daily quota.

Known limitations, by the single-writer design of the record store:

* Two registrations for the same email that overlap in time can both pass the
  uniqueness check before either write lands.
* ``check_and_increment_usage`` is check-then-increment. Two tabs sharing the
  same store can both pass the check and overrun the daily limit.
"""

import asyncio
import base64
import logging
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import quote

from scribe.config_table import ConfigTable
from scribe.errors import DuplicateEmail, InvalidCredentials
from scribe.event_log import EventLog
from scribe.models import (
    DailyUsage,
    LogType,
    Plan,
    UserRecord,
    calendar_day,
    new_id,
    to_millis,
    utcnow,
)
from scribe.record_store import JsonTable, RecordStore, TableKey
from scribe.session import Session

logger = logging.getLogger(__name__)

FEDERATED_DEMO_EMAIL = "demo@google.com"
FEDERATED_DEMO_AVATAR = "https://lh3.googleusercontent.com/a/default-user"
ADMIN_ID = "admin_1"
ADMIN_EMAIL = "admin@scribe.studio"
ADMIN_AVATAR = "https://ui-avatars.com/api/?name=Admin&background=000&color=fff"

REGISTER_LATENCY = 0.8
FEDERATED_LATENCY = 1.0


def encode_credential(password: str) -> str:
    """Reversible placeholder encoding. Not a password hash."""
    return base64.b64encode(password.encode("utf-8")).decode("ascii")


def avatar_url(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random"


class UserTable:
    """The full user table, keyed by id, unique by email."""

    def __init__(self, store: RecordStore):
        self.table = JsonTable(store, TableKey.USERS, empty=[])

    def all(self) -> list[UserRecord]:
        return [UserRecord.model_validate(u) for u in self.table.load()]

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        return next((u for u in self.all() if u.email == email), None)

    def get(self, user_id: str) -> Optional[UserRecord]:
        return next((u for u in self.all() if u.id == user_id), None)

    def upsert(self, user: UserRecord) -> UserRecord:
        """Insert, or merge ``user`` over the stored row with the same id.

        Fields ``user`` leaves unset keep their stored values, the credential
        included. Returns the record as stored.
        """
        rows = self.table.load()
        for index, row in enumerate(rows):
            if row.get("id") == user.id:
                existing = UserRecord.model_validate(row).to_document()
                rows[index] = {**existing, **user.to_document()}
                user = UserRecord.model_validate(rows[index])
                break
        else:
            rows.append(user.to_document())
        self.table.dump(rows)
        return user

    # --- Backup hooks ---

    def snapshot(self) -> list:
        return self.table.load()

    def restore(self, rows: list) -> None:
        self.table.dump(rows)

    def clear(self) -> None:
        self.table.clear()


class IdentityManager:
    """Moves the session between anonymous and authenticated and keeps quotas."""

    def __init__(
        self,
        store: RecordStore,
        session: Session,
        config: ConfigTable,
        events: EventLog,
        clock: Callable[[], datetime] = utcnow,
        latency: Optional[float] = None,
    ):
        self.users = UserTable(store)
        self.session = session
        self.config = config
        self.events = events
        self._clock = clock
        self._latency = latency

    def _today(self) -> str:
        return calendar_day(self._clock())

    async def _simulate_latency(self, default: float) -> None:
        await asyncio.sleep(default if self._latency is None else self._latency)

    # --- Session ---

    def get_current_user(self) -> Optional[UserRecord]:
        """Current user, with the daily counter reset if the calendar day changed."""
        user = self.session.user
        if user is None:
            return None
        user = user.model_copy(deep=True)
        today = self._today()
        if user.daily_usage is None or user.daily_usage.date != today:
            user.daily_usage = DailyUsage(count=0, date=today)
            user = self.set_current_user(user)
        return user

    def set_current_user(self, user: Optional[UserRecord]) -> Optional[UserRecord]:
        if user is None:
            self.session.teardown()
            return None
        user = self.users.upsert(user)
        if user.daily_usage is None:
            user.daily_usage = DailyUsage(count=0, date=self._today())
            user = self.users.upsert(user)
        self.session.bind(user)
        return user

    def logout(self) -> None:
        user = self.session.user
        self.set_current_user(None)
        if user:
            logger.info("User %s signed out", user.id)

    # --- Sign-in flows ---

    async def register(self, name: str, email: str, password: str) -> UserRecord:
        await self._simulate_latency(REGISTER_LATENCY)
        if self.users.find_by_email(email):
            raise DuplicateEmail(email)

        user = UserRecord(
            id=new_id("u"),
            email=email,
            name=name,
            credential_hash=encode_credential(password),
            plan=Plan.FREE,
            is_admin=False,
            registered_at=to_millis(self._clock()),
            daily_usage=DailyUsage(count=0, date=self._today()),
            avatar=avatar_url(name),
        )
        user = self.set_current_user(user)
        self.events.append(LogType.SUCCESS, f"New member registered: {email}", user.id)
        return user

    async def login(self, email: str, password: str) -> UserRecord:
        await self._simulate_latency(REGISTER_LATENCY)
        encoded = encode_credential(password)
        user = next(
            (u for u in self.users.all() if u.email == email and u.credential_hash == encoded),
            None,
        )
        if user is None:
            self.events.append(LogType.WARNING, f"Failed login attempt: {email}")
            raise InvalidCredentials()

        self.events.append(LogType.INFO, f"User login: {email}", user.id)
        return self.set_current_user(user)

    async def login_federated(self) -> UserRecord:
        client_id = self.config.get().google_auth_config.client_id
        logger.info("Federated login with client id %s", client_id or "DEMO_MODE")
        await self._simulate_latency(FEDERATED_LATENCY)

        user = self.users.find_by_email(FEDERATED_DEMO_EMAIL)
        if user is None:
            user = UserRecord(
                id=new_id("google"),
                email=FEDERATED_DEMO_EMAIL,
                name="Google User",
                plan=Plan.FREE,
                is_admin=False,
                registered_at=to_millis(self._clock()),
                daily_usage=DailyUsage(count=0, date=self._today()),
                avatar=FEDERATED_DEMO_AVATAR,
            )
        self.events.append(LogType.SUCCESS, f"Signed in with Google: {FEDERATED_DEMO_EMAIL}", user.id)
        return self.set_current_user(user)

    def login_as_admin(self) -> UserRecord:
        admin = next((u for u in self.users.all() if u.is_admin), None)
        if admin is None:
            admin = UserRecord(
                id=ADMIN_ID,
                email=ADMIN_EMAIL,
                name="System Administrator",
                plan=Plan.PREMIUM,
                is_admin=True,
                registered_at=to_millis(self._clock()),
                daily_usage=DailyUsage(count=0, date=self._today()),
                avatar=ADMIN_AVATAR,
            )
        self.events.append(LogType.INFO, "Administrator signed in.", admin.id)
        return self.set_current_user(admin)

    # --- Plan & quota ---

    def upgrade_plan(self, plan: Plan) -> Optional[UserRecord]:
        user = self.get_current_user()
        if user is None:
            return None
        user.plan = plan
        user = self.set_current_user(user)
        self.events.append(LogType.SUCCESS, f"Plan changed: {plan.value}", user.id)
        return user

    def check_and_increment_usage(self) -> bool:
        """Spend one unit of the daily quota; False means the request is refused."""
        user = self.get_current_user()
        if user is None:
            return False
        if user.plan == Plan.PREMIUM:
            return True

        limit = self.config.get().free_daily_limit
        if user.daily_usage.count >= limit:
            return False

        user.daily_usage.count += 1
        self.set_current_user(user)
        return True

    def list_users(self) -> list[UserRecord]:
        return self.users.all()
