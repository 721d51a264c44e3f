"""Response envelope, pagination metadata and shared field types."""
from datetime import datetime, timezone
from typing import Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, model_serializer

DataT = TypeVar("DataT")


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive values; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class OmitNoneModel(BaseModel):
    """Model that drops the fields listed in ``omit_if_none`` when they are None."""

    omit_if_none: ClassVar[tuple[str, ...]] = ()

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if isinstance(data, dict):
            for name in self.omit_if_none:
                if data.get(name) is None:
                    data.pop(name, None)
        return data


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class Envelope(OmitNoneModel, Generic[DataT]):
    """Standard response body: ``{success, message, data?}``; ``data`` is left out when empty."""

    omit_if_none: ClassVar[tuple[str, ...]] = ("data",)

    success: bool = True
    message: str
    data: DataT | None = None


class PaginatedEnvelope(Envelope[list[DataT]], Generic[DataT]):
    pagination: PaginationMeta


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str
