"""
In‑memory, insertion‑ordered record store.

``ResourceStore`` owns every record of one collection.  Records are
plain dictionaries carrying an immutable ``id`` (UUID4), an immutable
``created_at`` and, once mutated, an ``updated_at`` timestamp.  The
store keeps records in creation order and supports the forward,
cursor‑based listing the pagination engine builds on.

One re‑entrant lock serialises every operation, and callers always
receive copies, so a record handed out can never be observed half
written.  Nothing is persisted: the store lives as long as the
application that created it.
"""

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..core.errors import NotFound, ValidationError


logger = logging.getLogger(__name__)

Record = Dict[str, Any]

RESERVED_FIELDS = frozenset({"id", "created_at", "updated_at"})


def utc_now_iso() -> str:
    """Current UTC time as ISO‑8601 with a ``Z`` suffix and millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ResourceStore:
    """Insertion‑ordered collection of records, unique by ``id``.

    Parameters
    ----------
    name : str
        Collection name, used in log messages.
    create_schema, update_schema : Optional[Type[BaseModel]]
        Schema collaborators.  When given, fields passed to ``create``
        and ``update`` are validated through them and stored in their
        JSON‑ready form; a rejection surfaces as ``ValidationError``.
    """

    def __init__(
        self,
        name: str = "records",
        create_schema: Optional[Type[BaseModel]] = None,
        update_schema: Optional[Type[BaseModel]] = None,
    ) -> None:
        self.name = name
        self.create_schema = create_schema
        self.update_schema = update_schema
        # Python dicts preserve insertion order, which is the cursor order.
        self._records: Dict[str, Record] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate(self, fields: Mapping[str, Any], schema: Optional[Type[BaseModel]], partial: bool) -> Record:
        if not isinstance(fields, Mapping):
            raise ValidationError("Record fields must be a mapping")
        reserved = sorted(RESERVED_FIELDS.intersection(fields))
        if reserved:
            raise ValidationError(
                "Fields are managed by the store and cannot be set",
                details=[{"field": name, "message": "read-only field"} for name in reserved],
            )
        if schema is None:
            return dict(fields)
        try:
            model = schema.model_validate(dict(fields))
        except PydanticValidationError as exc:
            raise ValidationError(
                "Record fields failed validation",
                details=[
                    {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
                    for err in exc.errors()
                ],
            ) from exc
        return model.model_dump(mode="json", exclude_unset=partial)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, fields: Mapping[str, Any]) -> Record:
        """Append a new record and return a copy of it."""
        data = self._validate(fields, self.create_schema, partial=False)
        with self._lock:
            record_id = str(uuid.uuid4())
            while record_id in self._records:
                record_id = str(uuid.uuid4())
            record = {"id": record_id, **data, "created_at": utc_now_iso()}
            self._records[record_id] = record
            logger.info("Created %s record %s", self.name, record_id)
            return dict(record)

    def update(self, record_id: str, partial: Mapping[str, Any]) -> Record:
        """Shallow‑merge ``partial`` into the record and stamp ``updated_at``.

        Omitted fields are left untouched; the record keeps its position.
        """
        data = self._validate(partial, self.update_schema, partial=True)
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise NotFound(record_id)
            record.update(data)
            record["updated_at"] = utc_now_iso()
            logger.info("Updated %s record %s (%s)", self.name, record_id, ", ".join(sorted(data)) or "no fields")
            return dict(record)

    def get(self, record_id: str) -> Record:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise NotFound(record_id)
            return dict(record)

    def delete(self, record_id: str) -> None:
        """Remove a record.  The relative order of the others is unchanged."""
        with self._lock:
            if record_id not in self._records:
                raise NotFound(record_id)
            del self._records[record_id]
            logger.info("Deleted %s record %s", self.name, record_id)

    def list(self, after_id: Optional[str] = None, limit: int = 10) -> List[Record]:
        """Return up to ``limit`` records strictly after ``after_id``.

        Listing starts at the beginning when ``after_id`` is unset.  A
        cursor that no longer references a record (it was deleted, or
        never existed) also restarts from the beginning instead of
        failing.
        """
        if limit <= 0:
            return []
        with self._lock:
            ids = iter(self._records)
            if after_id is not None:
                if after_id in self._records:
                    for record_id in ids:
                        if record_id == after_id:
                            break
                else:
                    logger.debug("Cursor %s is unknown in %s; restarting from the beginning", after_id, self.name)
            page: List[Record] = []
            for record_id in ids:
                if len(page) >= limit:
                    break
                page.append(dict(self._records[record_id]))
            return page

    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._records

    def __iter__(self) -> Iterator[Record]:
        """Iterate over copies of all records, in insertion order."""
        with self._lock:
            snapshot = [dict(r) for r in self._records.values()]
        return iter(snapshot)
