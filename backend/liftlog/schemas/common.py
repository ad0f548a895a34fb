from typing import Annotated, Generic, TypeVar
from pydantic import BaseModel, Field, StringConstraints

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
PosInt = Annotated[int, Field(ge=1)]
NonNegInt = Annotated[int, Field(ge=0)]
NonNegFloat = Annotated[float, Field(ge=0, le=10000)]
# Client-side grouping token; only meaningful within one request
ClientIdStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]

T = TypeVar("T")

class PageOut(BaseModel, Generic[T]):
    data: list[T]
    total: int
    page: int
    limit: int
    last_page: int

    @classmethod
    def of(cls, page, items) -> "PageOut[T]":
        return cls(data=items, total=page.total, page=page.page, limit=page.limit, last_page=page.last_page)
