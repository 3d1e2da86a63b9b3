"""Tag Pydantic schemas."""

from fakeso.schemas.base import CamelModel


class TagIn(CamelModel):
    name: str
    description: str = ""


class TagOut(CamelModel):
    id: int
    name: str
    description: str = ""


class TagCount(CamelModel):
    name: str
    qcount: int
