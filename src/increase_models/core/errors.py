"""Error taxonomy for schema declaration, construction, and finalization."""

from __future__ import annotations

from collections.abc import Sequence


class BindingError(ValueError):
    """Base class for every model-binding failure."""


class SchemaDeclarationError(BindingError):
    """Raised when a model type or schema document declares fields incorrectly."""


class TypeCoercionError(BindingError):
    """Raised when a value cannot be coerced to a field's declared kind."""

    def __init__(self, path: str, expected: str, message: str) -> None:
        self.path = path
        self.expected = expected
        super().__init__(f"{path}: {message}")


class MissingRequiredFieldsError(BindingError):
    """Raised at finalization; names every required field still absent."""

    def __init__(
        self,
        model: str,
        missing: Sequence[str],
        missing_local: Sequence[str] | None = None,
    ) -> None:
        self.model = model
        self.missing = tuple(missing)
        self.missing_local = tuple(missing_local) if missing_local is not None else self.missing
        rendered = ", ".join(self.missing) if self.missing else "<none>"
        super().__init__(f"{model}: missing required fields: [{rendered}]")


__all__ = [
    "BindingError",
    "MissingRequiredFieldsError",
    "SchemaDeclarationError",
    "TypeCoercionError",
]
