"""
Module: storage.store

Purpose:
    Persist quotations per owner in a single JSON file.
    Each record belongs to exactly one owner; reads, updates and deletes
    are scoped by owner, so another owner's record behaves as missing.

Key Classes:
    - QuotationStore: create / update / delete / get / list
    - StoredQuotation: A persisted quotation with its id and timestamps
    - StoreError, RecordNotFoundError: Store failures

Dependencies:
    - json, tempfile (std): Atomic file writes
    - portalocker: Exclusive lock around every read-modify-write
    - core.models: Quotation serialization
    - core.schemas: ensure_valid() for raw records

Used By:
    - Applications keeping saved quotations per user (not the CLI)
"""

from __future__ import annotations

import json
import logging
import tempfile
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

import portalocker

from quotation_toolkit.core.models import Quotation
from quotation_toolkit.core.schemas import ensure_valid

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class StoreError(Exception):
    """Store file could not be read or written."""
    pass


class RecordNotFoundError(StoreError):
    """No record with this id for this owner."""

    def __init__(self, record_id: str):
        super().__init__(f"Quotation not found: {record_id}")
        self.record_id = record_id


@dataclass(frozen=True)
class StoredQuotation:
    """
    A persisted quotation.

    Attributes:
        id: Opaque record id
        owner_id: Owning principal
        created_at: Creation time (UTC)
        quotation: The quotation snapshot (owner_id set)
        updated_at: Last update time (UTC), None if never updated
    """

    id: str
    owner_id: str
    created_at: datetime
    quotation: Quotation
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.owner_id,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "quotation": self.quotation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> StoredQuotation:
        updated = data.get("updatedAt")
        return cls(
            id=data["id"],
            owner_id=data["userId"],
            created_at=datetime.fromisoformat(data["createdAt"]),
            quotation=Quotation.from_dict(data["quotation"]),
            updated_at=datetime.fromisoformat(updated) if updated else None,
        )


QuotationInput = Union[Quotation, Mapping[str, Any]]


class QuotationStore:
    """
    JSON-file-backed quotation store.

    The whole file is read for every operation and rewritten atomically
    (temp file + replace) for every change. Changes hold an exclusive
    portalocker lock on a sidecar ".lock" file, so concurrent writers in
    other processes never lose each other's records.

    Example:
        >>> store = QuotationStore(Path("quotations.json"))
        >>> record_id = store.create("user-1", quotation)
        >>> [r.id for r in store.list("user-1")]
        ['3f2c...']
    """

    def __init__(
        self,
        path: Path,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.path = Path(path)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ─────────────────────────────────────────────────────────────────────
    # Operations
    # ─────────────────────────────────────────────────────────────────────

    def create(self, owner_id: str, quotation: QuotationInput) -> str:
        """
        Store a new quotation for `owner_id`.

        Raw records are validated first.

        Returns:
            The new record id

        Raises:
            QuotationValidationError: If a raw record is invalid
            StoreError: If the store cannot be written
        """
        _require_owner(owner_id)
        snapshot = replace(_as_quotation(quotation), owner_id=owner_id)
        record = StoredQuotation(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            created_at=self._clock(),
            quotation=snapshot,
        )
        with self._locked():
            records = self._load()
            records.append(record)
            self._save(records)
        logger.info(f"Created quotation {record.id} for owner {owner_id}")
        return record.id

    def update(self, record_id: str, owner_id: str, quotation: QuotationInput) -> StoredQuotation:
        """
        Replace the quotation of an existing record.

        Raises:
            RecordNotFoundError: No such record for this owner
        """
        snapshot = replace(_as_quotation(quotation), owner_id=owner_id)
        with self._locked():
            records = self._load()
            index = self._find(records, record_id, owner_id)
            updated = replace(records[index], quotation=snapshot, updated_at=self._clock())
            records[index] = updated
            self._save(records)
        logger.info(f"Updated quotation {record_id}")
        return updated

    def delete(self, record_id: str, owner_id: str) -> None:
        """
        Remove a record.

        Raises:
            RecordNotFoundError: No such record for this owner
        """
        with self._locked():
            records = self._load()
            del records[self._find(records, record_id, owner_id)]
            self._save(records)
        logger.info(f"Deleted quotation {record_id}")

    def get(self, record_id: str, owner_id: str) -> StoredQuotation:
        """
        Fetch one record.

        Raises:
            RecordNotFoundError: No such record for this owner
        """
        records = self._load()
        return records[self._find(records, record_id, owner_id)]

    def list(self, owner_id: str) -> List[StoredQuotation]:
        """Records owned by `owner_id`, newest first."""
        owned = [r for r in self._load() if r.owner_id == owner_id]
        # Stable sort over reversed insertion order: later inserts win ties
        return sorted(reversed(owned), key=lambda r: r.created_at, reverse=True)

    # ─────────────────────────────────────────────────────────────────────
    # File handling
    # ─────────────────────────────────────────────────────────────────────

    def _find(self, records: List[StoredQuotation], record_id: str, owner_id: str) -> int:
        for index, record in enumerate(records):
            if record.id == record_id and record.owner_id == owner_id:
                return index
        raise RecordNotFoundError(record_id)

    @property
    def lock_path(self) -> Path:
        """Sidecar lock file; the store file itself is replaced on every write."""
        return self.path.with_name(self.path.name + ".lock")

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive lock for a whole read-modify-write."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(self.lock_path, "a", encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Failed to lock store {self.path}: {e}") from e

        with handle:
            portalocker.lock(handle, portalocker.LOCK_EX)
            try:
                yield
            finally:
                portalocker.unlock(handle)

    def _load(self) -> List[StoredQuotation]:
        """Read all records; a missing or corrupt file reads as empty."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Store file {self.path} is corrupt, treating as empty: {e}")
            return []
        except OSError as e:
            raise StoreError(f"Failed to read store {self.path}: {e}") from e

        entries = data.get("quotations") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            logger.warning(f"Store file {self.path} has no quotation list, treating as empty")
            return []

        records: List[StoredQuotation] = []
        for entry in entries:
            try:
                records.append(StoredQuotation.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping unreadable store entry: {e}")
        return records

    def _save(self, records: List[StoredQuotation]) -> None:
        payload = {
            "version": STORE_VERSION,
            "quotations": [r.to_dict() for r in records],
        }
        try:
            _atomic_write_json(payload, self.path)
        except OSError as e:
            raise StoreError(f"Failed to write store {self.path}: {e}") from e


def _as_quotation(value: QuotationInput) -> Quotation:
    if isinstance(value, Quotation):
        return value
    return ensure_valid(value)


def _require_owner(owner_id: str) -> None:
    if not owner_id or not str(owner_id).strip():
        raise ValueError("owner_id is required")


def _atomic_write_json(data: Dict[str, Any], path: Path) -> None:
    """Write JSON atomically using temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".json",
        dir=path.parent,
        delete=False,
        encoding="utf-8",
    ) as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path = Path(f.name)

    # replace() overwrites existing files on all platforms
    temp_path.replace(path)
