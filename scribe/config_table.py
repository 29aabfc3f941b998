"""Singleton configuration document with versioned migration and default merging."""

import copy
import logging
from typing import Callable

from scribe.defaults import default_config_document
from scribe.event_log import EventLog
from scribe.models import AppConfig, AppMode, LogType
from scribe.record_store import JsonTable, RecordStore, TableKey

logger = logging.getLogger(__name__)

CONFIG_SCHEMA_VERSION = 1

# Prepended to every system instruction so an emptied prompt still stays on task.
SAFETY_PREAMBLE = (
    "IMPORTANT: You are an AI writing assistant. Only help with writing and creative work."
)
FALLBACK_INSTRUCTION = "Please help the user write their story."
MIN_PROMPT_LENGTH = 10


def _from_unversioned(document: dict) -> dict:
    # Documents written before versioning carry no marker; fields added since
    # then are filled in by merge_with_defaults.
    document["schemaVersion"] = 1
    return document


# Maps a stored version to the function that lifts it to version + 1.
MIGRATIONS: dict[int, Callable[[dict], dict]] = {
    0: _from_unversioned,
}


def migrate_config(document: dict) -> dict:
    """Apply every migration between the stored version and the current one."""
    migrated = copy.deepcopy(document)
    version = migrated.get("schemaVersion", 0)
    if not isinstance(version, int):
        version = 0
    while version < CONFIG_SCHEMA_VERSION:
        migrated = MIGRATIONS[version](migrated)
        version += 1
    if version > CONFIG_SCHEMA_VERSION:
        logger.warning("Config schema version %s is newer than supported version %s",
                       version, CONFIG_SCHEMA_VERSION)
    return migrated


def merge_with_defaults(stored: dict, defaults: dict) -> dict:
    """Overlay a stored document on the defaults, one field at a time.

    Nested objects are merged independently. A list is taken from the stored
    document only if it is actually a list; otherwise the default list is used
    whole, never merged element-wise. ``None`` counts as missing. Keys unknown
    to the defaults are kept.
    """
    merged = copy.deepcopy(defaults)
    for key, value in stored.items():
        if value is None:
            continue
        default = defaults.get(key)
        if isinstance(default, dict):
            merged[key] = merge_with_defaults(value, default) if isinstance(value, dict) else copy.deepcopy(default)
        elif isinstance(default, list):
            merged[key] = copy.deepcopy(value) if isinstance(value, list) else copy.deepcopy(default)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigTable:
    def __init__(self, store: RecordStore, events: EventLog):
        self.table = JsonTable(store, TableKey.CONFIG)
        self.events = events

    def get(self) -> AppConfig:
        stored = self.table.load()
        if not isinstance(stored, dict):
            if stored is not None:
                logger.warning("Ignoring non-object config document of type %s", type(stored).__name__)
            return AppConfig.model_validate(default_config_document())
        document = merge_with_defaults(migrate_config(stored), default_config_document())
        return AppConfig.model_validate(document)

    def save(self, config: AppConfig) -> None:
        document = config.to_document()
        document["schemaVersion"] = CONFIG_SCHEMA_VERSION
        self.table.dump(document)
        self.events.append(LogType.WARNING, "System settings updated.")

    def system_instruction(self, mode: AppMode) -> str:
        """Instruction text a model collaborator should forward for ``mode``."""
        prompt = self.get().prompt_for(mode)
        if not prompt or len(prompt) < MIN_PROMPT_LENGTH:
            return f"{SAFETY_PREAMBLE} {FALLBACK_INSTRUCTION}"
        return f"{SAFETY_PREAMBLE}\n\n{prompt}"

    def public_view(self) -> dict:
        """Config as the rendering layer may see it: provider secrets removed."""
        document = self.get().to_document()
        document["shopierConfig"] = {"isEnabled": document["shopierConfig"]["isEnabled"]}
        return document

    # --- Backup hooks ---

    def snapshot(self):
        return self.table.load()

    def restore(self, document: dict) -> None:
        self.table.dump(document)

    def clear(self) -> None:
        self.table.clear()
