"""
Configuration store - batch criteria overrides and the scoring mode flag.

The store is a plain key-value map of strings:
  - "batchConfigurations": JSON map of batch name -> BatchCriteria (camelCase)
  - "isWeeklyScoringEnabled": "true" / "false"

Writes replace the whole value under a key, so concurrent writers race and
the last one wins. Configuration edits are rare, human-driven actions.

Absent or corrupt values are never fatal: they read as "no overrides" and
"per-entry mode".
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import ValidationError

from ..config import get_config_store_path
from ..constants import BATCH_CONFIGURATIONS_KEY, WEEKLY_SCORING_KEY
from ..models import BatchCriteria

logger = logging.getLogger(__name__)


class ConfigStore(ABC):
    """Minimal string key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Replace the value stored under ``key``."""


class InMemoryConfigStore(ConfigStore):
    """Dict-backed store for tests and embedding."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


class JsonFileConfigStore(ConfigStore):
    """Store persisted as one JSON object in a file.

    Every ``set`` rewrites the whole document through a temp file and an
    atomic rename.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else get_config_store_path()

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Unreadable config store {self.path}, treating as empty: {e}")
            return {}
        if not isinstance(document, dict):
            logger.error(f"Config store {self.path} is not a JSON object, treating as empty")
            return {}
        return document

    def get(self, key: str) -> Optional[str]:
        value = self._read_document().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        document = self._read_document()
        document[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".config_store.", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug(f"Wrote config store key {key} to {self.path}")


class ScoringConfigProvider:
    """Reads and writes overrides and the scoring mode through a ConfigStore.

    Inject one of these into the resolver, the aggregator and the group
    assembler instead of relying on process-wide state.
    """

    def __init__(self, store: Optional[ConfigStore] = None):
        self.store = store or InMemoryConfigStore()

    def _read_raw_overrides(self) -> dict[str, Any]:
        raw = self.store.get(BATCH_CONFIGURATIONS_KEY)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"Corrupt batch configurations, ignoring overrides: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error("Batch configurations are not a JSON object, ignoring overrides")
            return {}
        return data

    def get_overrides(self) -> dict[str, BatchCriteria]:
        """Persisted overrides keyed by lower-cased batch name.

        Malformed fields inside an entry are repaired (broken tables score
        nothing, broken minimums read as 0) so the override still replaces
        the built-in batch. Only entries that are not objects are skipped.
        """
        overrides: dict[str, BatchCriteria] = {}
        for name, data in self._read_raw_overrides().items():
            try:
                overrides[str(name).strip().lower()] = BatchCriteria.from_stored(data)
            except ValidationError as e:
                logger.warning(f"Skipping invalid override for batch '{name}': {e.error_count()} error(s)")
        return overrides

    def set_override(self, name: str, criteria: Union[BatchCriteria, dict]) -> BatchCriteria:
        """Replace one batch's override and persist the whole map.

        Raises:
            ValueError: if the batch name is blank
            pydantic.ValidationError: if ``criteria`` is not valid criteria
        """
        key = str(name).strip().lower()
        if not key:
            raise ValueError("Batch name must not be empty")
        validated = criteria if isinstance(criteria, BatchCriteria) else BatchCriteria.model_validate(criteria)

        overrides = self._read_raw_overrides()
        overrides[key] = validated.to_json_dict()
        self.store.set(BATCH_CONFIGURATIONS_KEY, json.dumps(overrides))
        logger.info(f"Saved override for batch '{key}'")
        return validated

    def clear_override(self, name: str) -> bool:
        """Drop one batch's override. Returns False if there was none."""
        key = str(name).strip().lower()
        overrides = self._read_raw_overrides()
        if key not in overrides:
            return False
        del overrides[key]
        self.store.set(BATCH_CONFIGURATIONS_KEY, json.dumps(overrides))
        logger.info(f"Cleared override for batch '{key}'")
        return True

    def is_weekly_scoring_enabled(self) -> bool:
        """True for weekly-consolidated mode; absent or unrecognised means per-entry."""
        raw = self.store.get(WEEKLY_SCORING_KEY)
        return raw is not None and raw.strip().lower() == "true"

    def set_weekly_scoring(self, enabled: bool) -> None:
        self.store.set(WEEKLY_SCORING_KEY, "true" if enabled else "false")
        logger.info(f"Weekly scoring {'enabled' if enabled else 'disabled'}")

    def snapshot(self) -> "ScoringConfigProvider":
        """In-memory copy of the current configuration.

        Lets a multi-user report score everyone against the same overrides
        and mode even if the backing store is written meanwhile.
        """
        copied = {}
        for key in (BATCH_CONFIGURATIONS_KEY, WEEKLY_SCORING_KEY):
            value = self.store.get(key)
            if value is not None:
                copied[key] = value
        return ScoringConfigProvider(InMemoryConfigStore(copied))
