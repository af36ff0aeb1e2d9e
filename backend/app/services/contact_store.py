"""
Contact store: in-memory contact records with an optional JSON snapshot file.
List with name search, get, create blank, partial update, delete.
"""

import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from app.core.config import get_settings
from app.schemas.contact import ContactRecord, ContactUpdate

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

# Demo contacts loaded into an empty store when SEED_CONTACTS is on.
SEED_CONTACTS: list[dict[str, Any]] = [
    {"first": "Shruti", "last": "Kapoor", "twitter": "shrutikapoor08"},
    {"first": "Glenn", "last": "Reyes", "twitter": "glnnrys"},
    {"first": "Ryan", "last": "Florence"},
    {"first": "Oscar", "last": "Newman", "twitter": "__oscarnewman"},
    {"first": "Michael", "last": "Jackson"},
    {"first": "Christopher", "last": "Chedeau", "twitter": "Vjeux"},
    {"first": "Cameron", "last": "Matheson", "twitter": "cmatheson"},
    {"first": "Brooks", "last": "Lybrand", "twitter": "BrooksLybrand"},
    {"first": "Alex", "last": "Anderson", "twitter": "ralex1993"},
    {"first": "Kent C.", "last": "Dodds", "twitter": "kentcdodds"},
]


class ContactStoreError(Exception):
    """Raised when the store cannot read or write its snapshot."""

    def __init__(self, message: str, detail: Any = None) -> None:
        self.message = message
        self.detail = detail
        super().__init__(message)


class ContactNotFoundError(Exception):
    """Raised when no contact exists for the given id (never created or deleted)."""

    def __init__(self, contact_id: str) -> None:
        self.contact_id = contact_id
        self.message = f"Contact {contact_id} not found"
        super().__init__(self.message)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _search_name(record: ContactRecord) -> str:
    """Lower-cased "first last" used for substring search."""
    return f"{record.first or ''} {record.last or ''}".lower()


def _require_id(contact_id: str) -> str:
    if not isinstance(contact_id, str) or not contact_id.strip():
        raise ValueError("Missing contact_id param")
    return contact_id


class ContactStore:
    """
    Thread-safe contact store. Records are kept in insertion order; ids are never reissued,
    even after delete. When data_file is set, every mutation rewrites the snapshot and a
    failed write rolls the mutation back.
    """

    def __init__(self, data_file: Path | str | None = None) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, ContactRecord] = {}
        self._retired_ids: set[str] = set()
        self._data_file = Path(data_file) if data_file else None
        if self._data_file is not None:
            self._load()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_contacts(self, query: str | None = None) -> list[ContactRecord]:
        """
        All contacts ordered by created_at (insertion order breaks ties).
        With a non-blank query, only contacts whose "first last" contains it, case-insensitively.
        """
        with self._lock:
            records = sorted(self._records.values(), key=lambda r: r.created_at)
        q = (query or "").strip().lower()
        if q:
            records = [r for r in records if q in _search_name(r)]
        return [r.model_copy() for r in records]

    def get_contact(self, contact_id: str) -> ContactRecord:
        _require_id(contact_id)
        with self._lock:
            record = self._records.get(contact_id)
        if record is None:
            raise ContactNotFoundError(contact_id)
        return record.model_copy()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_blank(self) -> ContactRecord:
        """New contact with only id and created_at set."""
        with self._lock:
            record = ContactRecord(id=self._new_id(), created_at=_utcnow())
            self._records[record.id] = record
            try:
                self._persist()
            except ContactStoreError:
                del self._records[record.id]
                raise
        logger.info("create_blank: id=%s", record.id)
        return record.model_copy()

    def update_contact(self, contact_id: str, patch: ContactUpdate | dict[str, Any]) -> ContactRecord:
        """Apply only the fields present in patch; everything else keeps its value."""
        _require_id(contact_id)
        if not isinstance(patch, ContactUpdate):
            patch = ContactUpdate.model_validate(patch)
        changes = patch.model_dump(exclude_unset=True)
        with self._lock:
            current = self._records.get(contact_id)
            if current is None:
                raise ContactNotFoundError(contact_id)
            updated = current.model_copy(update=changes)
            self._records[contact_id] = updated
            try:
                self._persist()
            except ContactStoreError:
                self._records[contact_id] = current
                raise
        logger.info("update_contact: id=%s fields=%s", contact_id, sorted(changes))
        return updated.model_copy()

    def delete_contact(self, contact_id: str) -> None:
        """Remove the contact. Deleting an unknown or already deleted id raises ContactNotFoundError."""
        _require_id(contact_id)
        with self._lock:
            if contact_id not in self._records:
                raise ContactNotFoundError(contact_id)
            previous = self._records
            self._records = {cid: r for cid, r in previous.items() if cid != contact_id}
            try:
                self._persist()
            except ContactStoreError:
                # Original dict, so insertion order (the created_at tie-break) is unchanged
                self._records = previous
                raise
        logger.info("delete_contact: id=%s", contact_id)

    def seed(self, contacts: Iterable[dict[str, Any]]) -> list[ContactRecord]:
        """Bulk insert contacts. Missing ids are generated; missing created_at is now."""
        added: list[ContactRecord] = []
        claimed: list[str] = []
        with self._lock:
            try:
                for data in contacts:
                    data = dict(data)
                    explicit_id = data.get("id")
                    if explicit_id and explicit_id in self._retired_ids:
                        raise ValueError(f"Duplicate contact id: {explicit_id}")
                    cid = explicit_id or self._new_id()
                    self._retired_ids.add(cid)
                    claimed.append(cid)
                    data["id"] = cid
                    data.setdefault("created_at", _utcnow())
                    record = ContactRecord.model_validate(data)
                    self._records[cid] = record
                    added.append(record)
                self._persist()
            except (ValueError, ContactStoreError):
                # All or nothing
                for record in added:
                    del self._records[record.id]
                self._retired_ids.difference_update(claimed)
                raise
        logger.info("seed: added %d contact(s)", len(added))
        return [r.model_copy() for r in added]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _new_id(self) -> str:
        while True:
            cid = uuid.uuid4().hex[:8]
            if cid not in self._retired_ids:
                self._retired_ids.add(cid)
                return cid

    def _load(self) -> None:
        path = self._data_file
        if path is None or not path.exists():
            return
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            records = [ContactRecord.model_validate(item) for item in raw.get("contacts") or []]
            retired = {str(x) for x in raw.get("retired_ids") or []}
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            raise ContactStoreError(f"Failed to load contacts from {path}: {e!s}", detail=str(path)) from e
        self._records = {r.id: r for r in records}
        self._retired_ids = retired | set(self._records)
        logger.info("Loaded %d contact(s) from %s", len(self._records), path)

    def _persist(self) -> None:
        """Rewrite the snapshot (temp file + replace). No-op for memory-only stores."""
        path = self._data_file
        if path is None:
            return
        payload = {
            "version": SNAPSHOT_VERSION,
            "contacts": [r.model_dump(mode="json") for r in self._records.values()],
            "retired_ids": sorted(self._retired_ids),
        }
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp, path)
        except OSError as e:
            logger.error("Persist contacts error: %s", str(e))
            raise ContactStoreError(f"Failed to write contacts to {path}: {e!s}", detail=str(path)) from e


@lru_cache()
def get_contact_store() -> ContactStore:
    """Dependency for FastAPI: one process-wide store built from settings."""
    settings = get_settings()
    store = ContactStore(settings.contacts_data_path)
    if settings.seed_contacts and len(store) == 0:
        store.seed(SEED_CONTACTS)
    return store
