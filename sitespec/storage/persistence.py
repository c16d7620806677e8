"""Handles saving and loading adapter specs to/from a JSON file."""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import logfire
from pydantic import ValidationError

from sitespec.models import AdapterSpec

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def _as_aware(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AdapterStore:
    """Flat collection of adapter specs persisted as {"adapters": [...]}.

    The store is the canonical copy of every accepted (or last-attempted) spec.
    It is not thread-safe; it is meant to be owned by one event loop.

    Attributes:
        path: Location of the JSON file
        adapters: In-memory specs in insertion order

    """

    def __init__(self, path: str | Path, clock: Callable[[], datetime] = utc_now, autoload: bool = True):
        """Initialize the store.

        Args:
            path: JSON file path; created on first load if missing
            clock: Source of updatedAt timestamps
            autoload: Load the file immediately

        """
        self.path = Path(path)
        self.clock = clock
        self.adapters: list[AdapterSpec] = []
        if autoload:
            self.load()

    def load(self) -> list[AdapterSpec]:
        """Load specs from disk, creating an empty store file if needed.

        A corrupt file is logged and leaves the store empty. Individual records that
        no longer validate are skipped.

        Returns:
            The loaded specs.

        """
        try:
            if not self.path.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text(json.dumps({'adapters': []}, indent=2), encoding='utf-8')

            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.error('Failed to load adapter store %s: %s', self.path, e)
            logfire.error('Failed to load adapter store', path=str(self.path), error=str(e))
            self.adapters = []
            return self.adapters

        records = data.get('adapters', []) if isinstance(data, dict) else []
        adapters = []
        for record in records:
            try:
                adapters.append(AdapterSpec.model_validate(record))
            except ValidationError as e:
                adapter_id = record.get('id', '?') if isinstance(record, dict) else '?'
                logger.warning('Skipping invalid stored adapter %s: %s', adapter_id, e)

        self.adapters = adapters
        logfire.info('Adapter store loaded', path=str(self.path), count=len(adapters))
        return self.adapters

    def save(self) -> None:
        """Write all specs to disk. Failures are logged, not raised."""
        payload = {'adapters': [spec.to_json_dict() for spec in self.adapters]}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')
        except OSError as e:
            logger.error('Failed to save adapter store %s: %s', self.path, e)
            logfire.error('Failed to save adapter store', path=str(self.path), error=str(e))

    def list_adapters(self) -> list[AdapterSpec]:
        """Return a copy of the stored specs."""
        return list(self.adapters)

    def get(self, adapter_id: str) -> AdapterSpec | None:
        """Return the spec stored under an id, if any."""
        return next((spec for spec in self.adapters if spec.id and spec.id == adapter_id), None)

    def find_adapter(self, url: str, template_hint: str | None = None) -> AdapterSpec | None:
        """Find the freshest spec whose match rule accepts a URL.

        Args:
            url: Absolute page URL
            template_hint: If given, only specs with this template (case-insensitive)

        Returns:
            Most recently updated matching spec, or None.

        """
        candidates = [spec for spec in self.adapters if spec.matches(url)]
        if template_hint:
            hint = template_hint.lower()
            candidates = [spec for spec in candidates if (spec.template or '').lower() == hint]
        if not candidates:
            return None

        # sorted() is stable, so equal timestamps keep store order
        return sorted(candidates, key=lambda spec: _as_aware(spec.updated_at), reverse=True)[0]

    def upsert_adapter(self, spec: AdapterSpec) -> AdapterSpec:
        """Stamp updatedAt and store a spec, replacing any entry with the same id.

        Args:
            spec: Spec to store; it is not mutated

        Returns:
            The stored copy.

        """
        entry = spec.model_copy(update={'updated_at': self.clock()})
        index = next((i for i, item in enumerate(self.adapters) if item.id and item.id == spec.id), None)
        if index is None:
            self.adapters.append(entry)
        else:
            self.adapters[index] = entry
        self.save()

        logger.info('Stored adapter id=%s template=%s', entry.id or 'unknown', entry.template or 'unknown')
        logfire.info('Adapter stored', id=entry.id, template=entry.template, replaced=index is not None)
        return entry

    def remove(self, adapter_id: str) -> bool:
        """Delete the spec stored under an id.

        Returns:
            True if a spec was removed.

        """
        before = len(self.adapters)
        self.adapters = [spec for spec in self.adapters if spec.id != adapter_id]
        if len(self.adapters) == before:
            return False
        self.save()
        return True

    def is_stale(self, spec: AdapterSpec, ttl_seconds: float, now: datetime | None = None) -> bool:
        """Check whether a spec is due for a background refresh.

        Specs without updatedAt are never considered stale.
        """
        if spec.updated_at is None:
            return False
        now = now or self.clock()
        return (now - _as_aware(spec.updated_at)).total_seconds() > ttl_seconds
