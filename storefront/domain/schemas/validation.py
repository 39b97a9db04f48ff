"""
Tagged validation results for upstream payloads.

``validate`` never raises for shape problems: it returns either ``Valid``
holding the typed record or ``Invalid`` listing every offending field. A bad
item is skipped by the caller while its siblings survive; a bad envelope is
escalated through ``validate_envelope``.
"""
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Generic, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from storefront.core.exceptions import SchemaValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FieldIssue:
    """One field-level problem found while validating a payload."""
    location: str
    message: str

    def to_dict(self) -> dict:
        return {"location": self.location, "message": self.message}


@dataclass(frozen=True)
class Valid(Generic[M]):
    value: M
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class Invalid:
    issues: Tuple[FieldIssue, ...]
    index: Optional[int] = None
    raw: Any = field(default=None, compare=False, repr=False)
    ok: ClassVar[bool] = False

    @property
    def locations(self) -> List[str]:
        return [issue.location for issue in self.issues]

    def describe(self) -> str:
        return "; ".join(f"{issue.location}: {issue.message}" for issue in self.issues)


ValidationResult = Union[Valid[M], Invalid]


def _issues_from(exc: ValidationError) -> Tuple[FieldIssue, ...]:
    return tuple(
        FieldIssue(
            location=".".join(str(part) for part in error["loc"]) or "<root>",
            message=error["msg"],
        )
        for error in exc.errors()
    )


def validate(model: Type[M], raw: Any, context: Optional[Mapping[str, Any]] = None) -> ValidationResult:
    """Validate ``raw`` against ``model`` without raising."""
    try:
        return Valid(model.model_validate(raw, context=dict(context) if context else None))
    except ValidationError as exc:
        return Invalid(issues=_issues_from(exc), raw=raw)


def validate_items(
    model: Type[M],
    raw_items: Iterable[Any],
    context: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[M], List[Invalid]]:
    """
    Validate each item independently.

    Returns:
        The valid records in input order and the failures tagged with their index.
    """
    records: List[M] = []
    failures: List[Invalid] = []
    for index, raw in enumerate(raw_items):
        result = validate(model, raw, context)
        if isinstance(result, Valid):
            records.append(result.value)
        else:
            failures.append(replace(result, index=index))
    return records, failures


def validate_envelope(model: Type[M], raw: Any, source: str) -> M:
    """
    Validate a response envelope.

    Raises:
        SchemaValidationError: If the envelope itself is malformed
    """
    result = validate(model, raw)
    if isinstance(result, Invalid):
        raise SchemaValidationError(source=source, issues=[issue.to_dict() for issue in result.issues])
    return result.value
