# Engine error taxonomy and result containers
# Engine operations return these instead of raising, so callers can render
# inline messages without unwinding the request.

from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError as SchemaValidationError

from schemas.seeding import Influencer


class EngineError(Exception):
    """Base class for errors reported by the seeding engine."""
    code = "engine_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "field": self.field}

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.field == other.field
        )

    def __hash__(self):
        return hash((self.code, self.message, self.field))


class ValidationError(EngineError):
    """A proposed update is malformed or misses a required field."""
    code = "validation_error"


class DuplicateError(EngineError):
    """A posted video with the same id or link is already logged."""
    code = "duplicate"


class ParseError(EngineError):
    """A video link could not be parsed. Extraction currently always falls back."""
    code = "parse_error"


class PreconditionError(EngineError):
    """The entity is not in a state that allows the requested operation."""
    code = "precondition_failed"


class NotFoundError(EngineError):
    """An item referenced inside the entity (a milestone) does not exist."""
    code = "not_found"


def from_schema_error(exc: SchemaValidationError) -> ValidationError:
    """Collapse a pydantic validation failure into one engine ValidationError."""
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return ValidationError(f"{location}: {first.get('msg')}", field=location or None)


class Effect(BaseModel):
    """Something the UI layer should announce (toast, notification)."""
    type: str
    data: dict = Field(default_factory=dict)


class Result(BaseModel):
    """Value-or-error container for engine operations."""
    value: Any = None
    error: Optional[EngineError] = None

    class Config:
        arbitrary_types_allowed = True

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: EngineError) -> "Result":
        return cls(error=error)


class EngineResult(BaseModel):
    """Outcome of a lifecycle operation on one influencer.

    `influencer` is the next entity state (the unchanged input on failure),
    `effects` lists what happened, `error` is set when nothing was applied.
    """
    influencer: Optional[Influencer] = None
    effects: List[Effect] = Field(default_factory=list)
    error: Optional[EngineError] = None

    class Config:
        arbitrary_types_allowed = True

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def status_changes(self) -> List[Effect]:
        return [e for e in self.effects if e.type == "status_changed"]
