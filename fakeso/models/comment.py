"""A comment is always a leaf owned by one question or answer."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fakeso.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    comment_by: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    comment_date_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False)
