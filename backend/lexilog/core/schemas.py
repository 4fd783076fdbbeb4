"""
Record shapes for words and users.

``WordInsert`` is the creation payload (generated ``id``/``created_at``
removed), ``WordForm`` tightens it with the form rules, ``WordUpdate`` is the
patch shape and ``WordOut`` the stored record. Every shape accepts camelCase
or snake_case keys and serializes to camelCase.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError

ShapeT = TypeVar("ShapeT", bound=BaseModel)


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ---------- Words ----------


class WordInsert(CamelModel):
    word: str
    definition: str
    example: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    date_learned: date = Field(default_factory=date.today)

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_are_empty(cls, v):
        return [] if v is None else v


class WordForm(WordInsert):
    word: str = Field(..., min_length=1)
    definition: str = Field(..., min_length=1)


class WordUpdate(CamelModel):
    """
    Patch for an existing word.
    Absent fields stay unchanged; an explicit null clears ``example`` and
    empties ``tags`` but is rejected for the required fields.
    """

    word: Optional[str] = Field(None, min_length=1)
    definition: Optional[str] = Field(None, min_length=1)
    example: Optional[str] = None
    tags: Optional[List[str]] = None
    date_learned: Optional[date] = None

    @field_validator("word", "definition", "date_learned", mode="before")
    @classmethod
    def required_fields_not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_are_empty(cls, v):
        return [] if v is None else v

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class WordOut(CamelModel):
    id: int
    word: str
    definition: str
    example: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    date_learned: date
    created_at: datetime


# ---------- Users ----------


class UserCreate(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(CamelModel):
    id: int
    username: str
    password: str


# ---------- Validation ----------


def _error_path(loc) -> str:
    if not loc:
        return "body"
    return ".".join(str(part) for part in loc)


def validate_payload(shape: Type[ShapeT], payload: Any) -> ShapeT:
    """Validate ``payload`` against ``shape`` or raise our ValidationError."""
    try:
        return shape.model_validate(payload)
    except PydanticValidationError as exc:
        errors: Dict[str, str] = {}
        for err in exc.errors():
            errors.setdefault(_error_path(err["loc"]), err["msg"])
        raise ValidationError(errors) from exc
