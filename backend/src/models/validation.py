"""Field validation result model."""

from pydantic import BaseModel


class ValidationResult(BaseModel):
    """Outcome of validating one value against one field."""

    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, error=reason)

    def __bool__(self) -> bool:
        return self.ok
