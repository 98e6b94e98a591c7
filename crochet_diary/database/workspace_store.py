"""Workspace state store — per-entry viewing state, one blob for all keys."""

from __future__ import annotations

import logging

from crochet_diary.constants import WORKSPACE_STATE_KEY
from crochet_diary.core.serializers import (
    SchemaDecodeError,
    SchemaEncodeError,
    decode_workspace_states,
    encode_workspace_states,
)
from crochet_diary.database.settings_repository import SettingsRepository
from crochet_diary.models.workspace import WorkspaceState

logger = logging.getLogger(__name__)


class WorkspaceStateStore:
    """Load / save the whole ``key -> WorkspaceState`` map."""

    def __init__(self, settings: SettingsRepository, key: str = WORKSPACE_STATE_KEY):
        self._settings = settings
        self._key = key

    def load_all(self) -> dict[str, WorkspaceState]:
        """Decode the whole map; empty or undecodable blobs yield ``{}``."""
        raw = self._settings.get_value(self._key)
        if not raw:
            return {}
        try:
            return decode_workspace_states(raw)
        except SchemaDecodeError:
            logger.warning("Failed to decode workspace state", exc_info=True)
            return {}

    def save_all(self, states: dict[str, WorkspaceState]) -> bool:
        """Overwrite the whole map. Encoding failures leave it untouched."""
        try:
            data = encode_workspace_states(states)
        except SchemaEncodeError:
            logger.error("Failed to encode workspace state", exc_info=True)
            return False
        self._settings.set_value(self._key, data)
        return True
