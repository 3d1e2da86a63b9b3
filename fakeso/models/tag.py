"""Tag model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fakeso.database import Base


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
