from __future__ import annotations

import asyncio
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import UUID

from tilenotes.core.errors import PersistenceError
from tilenotes.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from pydantic import BaseModel

    from supabase import Client

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound="BaseModel")


class SupabaseTableRepository:
    """Shared plumbing for repositories backed by one PostgREST table.

    The supabase client is synchronous, so every call is pushed to a worker
    thread. Any failure surfaces as `PersistenceError` carrying the raw
    message from PostgREST.
    """

    TABLE_NAME: str = ""

    def __init__(self, client: Client) -> None:
        self._client: Client = client

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    async def _run(self, func: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(func)
        except Exception as err:
            message = getattr(err, "message", None) or str(err) or type(err).__name__
            logger.warning(
                "Supabase %s operation failed: %s",
                self.TABLE_NAME,
                message,
                extra={"table": self.TABLE_NAME, "error_type": type(err).__name__},
            )
            raise PersistenceError(message) from err

    @staticmethod
    def _rows(resp: Any) -> list[dict[str, Any]]:
        data = getattr(resp, "data", None)
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return [data]
        return []

    @staticmethod
    def _jsonable(value: Any) -> Any:
        """Convert ids, timestamps and enums into JSON types PostgREST accepts."""
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (list, tuple)):
            return [SupabaseTableRepository._jsonable(v) for v in value]
        if isinstance(value, dict):
            return {k: SupabaseTableRepository._jsonable(v) for k, v in value.items()}
        return value

    @staticmethod
    def _to_row(model: BaseModel, *, drop_none: tuple[str, ...] = ()) -> dict[str, Any]:
        row = model.model_dump(mode="json")
        for key in drop_none:
            if row.get(key) is None:
                row.pop(key, None)
        return row

    @staticmethod
    def _to_model(model_cls: type[ModelT], row: dict[str, Any]) -> ModelT:
        # Drop columns the domain model does not know about (views, ranks, joins)
        known = {k: v for k, v in row.items() if k in model_cls.model_fields}
        return model_cls.model_validate(known)
