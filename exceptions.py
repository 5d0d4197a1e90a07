from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class ProductInsightError(Exception):
    """Base error, carries the HTTP status the route boundary maps it to."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ProductInsightError):
    """Malformed request or AI payload. `errors` lists each offending field."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["details"] = [asdict(error) for error in self.errors]
        return body

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        fields = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        return f"{self.message} ({fields})"


class NotFoundError(ProductInsightError):
    status_code = 404


class ConfigurationError(ProductInsightError):
    status_code = 500


class UpstreamError(ProductInsightError):
    status_code = 502


class InternalError(ProductInsightError):
    status_code = 500
