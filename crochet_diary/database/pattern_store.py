"""Pattern store — durable storage of the whole pattern list.

The list is kept as one JSON blob under ``patterns_data``. Loading falls
back to the older record shape (``isFinished`` instead of
``isInWorks``/``isStarred``, no ``stitchImages``) and writes the migrated
list straight back in the current shape. If neither shape decodes, the
store logs and returns an empty list; stored data is then lost on the
next save.
"""

from __future__ import annotations

import logging

from crochet_diary.constants import PATTERNS_DATA_KEY
from crochet_diary.core.serializers import (
    SchemaDecodeError,
    SchemaEncodeError,
    decode_legacy_patterns,
    decode_patterns,
    encode_patterns,
)
from crochet_diary.database.settings_repository import SettingsRepository
from crochet_diary.models.pattern import CrochetPattern

logger = logging.getLogger(__name__)


class PatternStore:
    """Whole-list load/save of ``CrochetPattern`` records."""

    def __init__(self, settings: SettingsRepository, key: str = PATTERNS_DATA_KEY):
        self._settings = settings
        self._key = key

    def load(self) -> list[CrochetPattern]:
        """Load all patterns, migrating the older shape if necessary."""
        raw = self._settings.get_value(self._key)
        if not raw:
            return []

        try:
            return decode_patterns(raw)
        except SchemaDecodeError as exc:
            logger.info("Stored patterns not in current shape (%s); trying legacy shape", exc)

        try:
            legacy = decode_legacy_patterns(raw)
        except SchemaDecodeError:
            logger.warning("Failed to decode/migrate patterns", exc_info=True)
            return []

        migrated = [old.migrate() for old in legacy]
        self.save(migrated)
        logger.info("Migrated %d patterns from legacy shape", len(migrated))
        return migrated

    def save(self, patterns: list[CrochetPattern]) -> bool:
        """Overwrite the stored list with a full snapshot.

        Returns:
            False if the list could not be encoded; the stored blob is
            left untouched in that case.
        """
        try:
            data = encode_patterns(patterns)
        except SchemaEncodeError:
            logger.error("Failed to encode patterns", exc_info=True)
            return False
        self._settings.set_value(self._key, data)
        return True
