"""Resource stores: remote CRUD with a durable local mirror.

When the API is reachable, reads and writes go to it and the results are
mirrored locally. Otherwise, or when a call fails, reads come from the
mirror and writes land in it directly. Local-only records are never pushed
to the API later.
"""
from typing import Any, Generic, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from src.client.api import ResourceApi
from src.client.connectivity import ConnectivityMonitor
from src.client.exceptions import ApiError, DraftValidationError
from src.client.local_store import LocalStore, StorageKey, generate_id
from src.core.models import utcnow
from src.core.schemas import RecordResponse

logger = structlog.get_logger(__name__)

RecordT = TypeVar("RecordT", bound=RecordResponse)
CreateT = TypeVar("CreateT", bound=BaseModel)
UpdateT = TypeVar("UpdateT", bound=BaseModel)


def format_validation_error(error: ValidationError) -> str:
    """Human-readable one-line summary of a pydantic ValidationError."""
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"])
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)


class ResourceStore(Generic[RecordT, CreateT, UpdateT]):
    """In-memory snapshot of one resource collection.

    ``load`` never raises; a failed remote load is recorded in ``error`` and
    the local mirror is served instead. Responses from a superseded ``load``
    or arriving after ``close`` are discarded.
    """

    record_model: type[RecordT]
    create_model: type[CreateT]
    update_model: type[UpdateT]
    storage_key: StorageKey
    resource_name: str = "record"

    def __init__(self, api: ResourceApi, connectivity: ConnectivityMonitor, store: LocalStore):
        self.api = api
        self.connectivity = connectivity
        self.store = store
        self.items: list[RecordT] = []
        self.loading = False
        self.error: str | None = None
        self._generation = 0
        self._closed = False

    # Local mirror

    def read_mirror(self) -> list[RecordT]:
        """Records persisted locally. Entries that no longer validate are dropped."""
        raw = self.store.get(self.storage_key, [])
        if not isinstance(raw, list):
            return []
        records = []
        for entry in raw:
            try:
                records.append(self.record_model.model_validate(entry))
            except ValidationError:
                logger.warning("mirror_entry_skipped", resource=self.resource_name)
        return records

    def _write_mirror(self, records: list[RecordT]) -> None:
        self.store.set(self.storage_key, [r.model_dump(mode="json") for r in records])

    def _mirror_upsert(self, record: RecordT) -> None:
        mirror = self.read_mirror()
        for index, existing in enumerate(mirror):
            if existing.id == record.id:
                mirror[index] = record
                break
        else:
            mirror.append(record)
        self._write_mirror(mirror)

    def _mirror_discard(self, record_id: str) -> bool:
        mirror = self.read_mirror()
        remaining = [r for r in mirror if r.id != record_id]
        if len(remaining) != len(mirror):
            self._write_mirror(remaining)
            return True
        return False

    def _set_item(self, record: RecordT) -> None:
        for index, existing in enumerate(self.items):
            if existing.id == record.id:
                self.items[index] = record
                return
        self.items.append(record)

    # Hooks for subclasses

    def _draft_fields(self, draft: CreateT) -> dict[str, Any]:
        return draft.model_dump()

    def _patch_fields(self, patch: UpdateT) -> dict[str, Any]:
        return patch.model_dump(exclude_none=True)

    def _check_editable(self, current: RecordT | None) -> None:
        pass

    def _on_update_error(self, record_id: str, error: ApiError) -> None:
        pass

    # Validation

    def _validate(self, model: type[BaseModel], data: Any) -> Any:
        if isinstance(data, model):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise DraftValidationError(
                f"Invalid {self.resource_name}: {format_validation_error(e)}"
            ) from e

    def _build_local(self, draft: CreateT) -> RecordT:
        now = utcnow()
        return self.record_model.model_validate(
            {**self._draft_fields(draft), "id": generate_id(), "created_at": now, "updated_at": now}
        )

    def _merge_local(self, current: RecordT, patch: UpdateT) -> RecordT:
        data = current.model_dump()
        data.update(self._patch_fields(patch))
        data["updated_at"] = utcnow()
        return self.record_model.model_validate(data)

    # Operations

    def _is_stale(self, generation: int) -> bool:
        return self._closed or generation != self._generation

    async def load(self) -> list[RecordT]:
        """Refresh ``items`` from the API, or from the mirror when offline or on failure."""
        self._generation += 1
        generation = self._generation
        self.loading = True
        self.error = None

        if not self.connectivity.connected:
            self.items = self.read_mirror()
            self.loading = False
            return self.items

        try:
            payload = await self.api.list()
            records = [self.record_model.model_validate(entry) for entry in payload]
        except (ApiError, ValidationError) as e:
            if self._is_stale(generation):
                logger.debug("stale_load_discarded", resource=self.resource_name)
                return self.items
            logger.warning("remote_load_failed", resource=self.resource_name, error=str(e))
            self.error = str(e)
            self.items = self.read_mirror()
        else:
            if self._is_stale(generation):
                logger.debug("stale_load_discarded", resource=self.resource_name)
                return self.items
            self.items = records
            self._write_mirror(records)

        self.loading = False
        return self.items

    async def add(self, draft: CreateT | dict[str, Any]) -> RecordT:
        """Create a record remotely when possible, else durably in the local mirror."""
        draft = self._validate(self.create_model, draft)

        if self.connectivity.connected:
            try:
                payload = await self.api.create(draft.model_dump(mode="json", exclude_none=True))
                record = self.record_model.model_validate(payload)
            except (ApiError, ValidationError) as e:
                logger.warning("remote_create_failed", resource=self.resource_name, error=str(e))
            else:
                self._set_item(record)
                self._mirror_upsert(record)
                return record

        record = self._build_local(draft)
        logger.info("record_created_locally", resource=self.resource_name, id=record.id)
        self._set_item(record)
        self._mirror_upsert(record)
        return record

    async def update(self, record_id: str, patch: UpdateT | dict[str, Any]) -> RecordT | None:
        """Update a record. Returns None when it is unknown both locally and remotely."""
        patch = self._validate(self.update_model, patch)
        current = self.get(record_id) or self._find_in_mirror(record_id)
        self._check_editable(current)

        if self.connectivity.connected:
            try:
                payload = await self.api.update(record_id, patch.model_dump(mode="json", exclude_none=True))
                record = self.record_model.model_validate(payload)
            except ApiError as e:
                self._on_update_error(record_id, e)
                logger.warning("remote_update_failed", resource=self.resource_name, id=record_id, error=str(e))
            except ValidationError as e:
                logger.warning("remote_update_failed", resource=self.resource_name, id=record_id, error=str(e))
            else:
                self._set_item(record)
                self._mirror_upsert(record)
                return record

        if current is None:
            return None
        record = self._merge_local(current, patch)
        self._set_item(record)
        self._mirror_upsert(record)
        return record

    async def remove(self, record_id: str) -> bool:
        """Delete remotely when connected, and always locally.

        A remote 404 counts as already deleted. Returns whether the record
        was known locally.
        """
        if self.connectivity.connected:
            try:
                await self.api.delete(record_id)
            except ApiError as e:
                if e.not_found:
                    logger.info("remote_record_already_gone", resource=self.resource_name, id=record_id)
                else:
                    logger.warning("remote_delete_failed", resource=self.resource_name, id=record_id, error=str(e))

        known = any(item.id == record_id for item in self.items)
        self.items = [item for item in self.items if item.id != record_id]
        in_mirror = self._mirror_discard(record_id)
        return known or in_mirror

    def get(self, record_id: str) -> RecordT | None:
        """In-memory lookup."""
        return next((item for item in self.items if item.id == record_id), None)

    def _find_in_mirror(self, record_id: str) -> RecordT | None:
        return next((r for r in self.read_mirror() if r.id == record_id), None)

    def close(self) -> None:
        """Stop applying responses from in-flight loads."""
        self._closed = True
        self.loading = False

