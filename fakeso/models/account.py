"""Account model — registered users, their role and accessibility settings."""

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from fakeso.database import Base


class UserTypeEnum(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    OWNER = "owner"


class ThemeEnum(str, enum.Enum):
    LIGHT = "light"
    DARK = "dark"
    NORTHEASTERN = "northeastern"
    OCEANIC = "oceanic"
    HIGH_CONTRAST = "highContrast"
    COLORBLIND_FRIENDLY = "colorblindFriendly"
    GREYSCALE = "greyscale"


class TextSizeEnum(str, enum.Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Account(Base):
    __tablename__ = "accounts"

    # ── Identity ──
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    user_type: Mapped[UserTypeEnum] = mapped_column(
        Enum(UserTypeEnum), default=UserTypeEnum.USER
    )
    score: Mapped[int] = mapped_column(Integer, default=0)

    # ── Settings ──
    theme: Mapped[ThemeEnum] = mapped_column(Enum(ThemeEnum), default=ThemeEnum.LIGHT)
    text_size: Mapped[TextSizeEnum] = mapped_column(
        Enum(TextSizeEnum), default=TextSizeEnum.MEDIUM
    )
    screen_reader: Mapped[bool] = mapped_column(Boolean, default=False)

    # ── Timestamps ──
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
