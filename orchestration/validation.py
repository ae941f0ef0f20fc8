"""Context validators - Validator protocol and adapters."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from .utils import maybe_await


@dataclass
class ValidationIssue:
    """One problem found in a context."""

    path: list[str | int]
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a context."""

    success: bool
    errors: list[ValidationIssue] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]


class Validator(Protocol):
    """Protocol for context validators.

    Implementations must not mutate the context. ``validate`` may return the
    result directly or an awaitable resolving to it.
    """

    def validate(
        self, context: Mapping[str, Any]
    ) -> ValidationResult | Awaitable[ValidationResult]:
        ...


class PydanticValidator:
    """Validate the context against a pydantic model.

    The model only checks the shape; the context itself is left untouched.
    """

    def __init__(self, model: type[BaseModel]) -> None:
        self._model = model

    def validate(self, context: Mapping[str, Any]) -> ValidationResult:
        try:
            self._model.model_validate(dict(context))
        except ValidationError as exc:
            return ValidationResult(
                success=False,
                errors=[
                    ValidationIssue(path=list(err["loc"]), message=_format_error(err))
                    for err in exc.errors()
                ],
            )
        return ValidationResult(success=True)


class CallableValidator:
    """Validate the context with a predicate.

    Args:
        check: Returns True when the context is acceptable
        message: Error message reported when ``check`` returns False
    """

    def __init__(
        self, check: Callable[[Mapping[str, Any]], bool], message: str = "Invalid context"
    ) -> None:
        self._check = check
        self._message = message

    def validate(self, context: Mapping[str, Any]) -> ValidationResult:
        if self._check(context):
            return ValidationResult(success=True)
        return ValidationResult(
            success=False, errors=[ValidationIssue(path=[], message=self._message)]
        )


async def run_validator(validator: Validator, context: Mapping[str, Any]) -> ValidationResult:
    """Run a validator, awaiting its result when needed."""
    return await maybe_await(validator.validate(context))


def _format_error(err: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]
