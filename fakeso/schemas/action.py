"""Moderator action Pydantic schemas."""

from typing import Optional

from pydantic import Field

from fakeso.schemas.base import CamelModel


class Actor(CamelModel):
    """The account asking to act, identified by its credentials."""
    username: str
    hashed_password: str


class ActionRequest(CamelModel):
    user: Actor
    action_type: str
    post_type: str
    post_id: int = Field(alias="postID")
    parent_id: Optional[int] = Field(default=None, alias="parentID")
    parent_post_type: Optional[str] = None
