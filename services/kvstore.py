"""
Key/Value Store Service

Thin wrapper over the KeyValueEntry table. Every write commits.
"""

import json
import logging

from models import db, KeyValueEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    """String values keyed by string, plus JSON helpers."""

    @property
    def session(self):
        return db.session

    def _entry(self, key):
        return self.session.execute(
            db.select(KeyValueEntry)
            .filter_by(key=key)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def get(self, key):
        entry = self._entry(key)
        return entry.value if entry else None

    def set(self, key, value):
        entry = self._entry(key)
        if entry is None:
            self.session.add(KeyValueEntry(key=key, value=value))
        else:
            entry.value = value
        self.session.commit()

    def delete(self, key):
        entry = self._entry(key)
        if entry is not None:
            self.session.delete(entry)
            self.session.commit()

    def keys_with_prefix(self, prefix):
        # LIKE would treat '%' and '_' in recipe names as wildcards
        keys = self.session.execute(db.select(KeyValueEntry.key)).scalars()
        return [k for k in keys if k.startswith(prefix)]

    def get_json(self, key, default=None):
        """Return the decoded value, or default if missing or unparseable."""
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Ignoring malformed JSON stored under %r", key)
            return default

    def set_json(self, key, value):
        self.set(key, json.dumps(value, ensure_ascii=False))
