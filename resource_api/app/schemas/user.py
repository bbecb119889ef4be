"""
Pydantic models for user data.

``UserCreate`` and ``UserUpdate`` are the schema collaborators handed to
the resource store: the store validates incoming fields through them
and stores the JSON‑ready dump.  Stored records add ``id``, ``created_at`` and
``updated_at``.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserBase(BaseModel):
    user_name: str = Field(..., min_length=1, examples=["jdoe"])
    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["jdoe@example.com"])
    birth_date: date = Field(..., examples=["1990-05-17"])

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class UserCreate(UserBase):
    """Schema for creating a user."""

    pass


class UserUpdate(BaseModel):
    """Schema for partially updating a user.

    All fields are optional; only provided fields are merged into the
    stored record.
    """

    user_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    birth_date: Optional[date] = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("user_name", "email", "birth_date")
    @classmethod
    def not_null(cls, value):
        # omitting a field leaves it unchanged; null is not a value
        if value is None:
            raise ValueError("must not be null")
        return value
