from fastapi import HTTPException
from pydantic import BaseModel
from typing import Iterable, Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class ConfigurationError(DomainException):
    """A financial configuration is unvalidated or cannot be evaluated."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=422,
            title="Invalid financial configuration",
            detail=detail,
            code="configuration_error",
        )


class IncompleteScoresError(DomainException):
    """Payouts were requested before every team scored every hole."""

    def __init__(self, missing: Iterable[tuple[str, int]]) -> None:
        self.missing = list(missing)
        preview = ", ".join(
            f"team '{team_id}' hole {hole}" for team_id, hole in self.missing[:5]
        )
        if len(self.missing) > 5:
            preview += f" and {len(self.missing) - 5} more"
        super().__init__(
            status_code=409,
            title="Scorecard incomplete",
            detail=f"missing scores for {preview}",
            code="incomplete_scores",
        )


class InvalidWinnerError(DomainException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=400,
            title="Invalid contest winner",
            detail=detail,
            code="invalid_winner",
        )


class RoundStateError(DomainException):
    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=409,
            title="Invalid round state",
            detail=detail,
            code="invalid_round_state",
        )


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
