from typing import Annotated, Generic, List, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from .. import ids

T = TypeVar("T")


def _key_to_str(value):
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ids.decode(value)
    return value


# Binary keys coming off the ORM are rendered as UUID strings.
IdStr = Annotated[str, BeforeValidator(_key_to_str)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PageResponse(CamelModel, Generic[T]):
    """Page envelope shared by all list endpoints."""
    page: int
    page_size: int
    count: int
    data: List[T]
