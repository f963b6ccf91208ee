"""
Schemas
File: verification.py

Audit outcomes for claims files. A failed proof or a root mismatch is an
expected result of an audit, so it is recorded here rather than raised.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import AllotreeError


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """One audit step: a single claim proof, the index set, or the root."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="claim:<key>, index_set or root_match",
        min_length=1,
    )
    ok: bool = Field(..., description="Whether the step passed")
    severity: CheckSeverity = Field(..., description="info when passed, error when failed")
    message: str = Field(..., description="Human-readable outcome")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Entry index, error code or rebuilt root",
    )

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message, details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message, details=details or {})


class VerificationResult(BaseModel):
    """
    Audit of a whole claims file.

    `checks` holds one entry per claim, then the index-set check and the
    root reconciliation check. `error` is set when the root could not be
    rebuilt at all.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(..., description="True when every check passed")
    checks: list[CheckResult] = Field(default_factory=list)
    expected_root: str | None = Field(
        default=None,
        description="merkleRoot stored in the claims file",
    )
    rebuilt_root: str | None = Field(
        default=None,
        description="Root rebuilt from the raw entries",
    )
    error: AllotreeError | None = Field(default=None)

    @property
    def error_count(self) -> int:
        return sum(1 for check in self.checks if check.is_error)

    @property
    def passed_count(self) -> int:
        return sum(1 for check in self.checks if check.ok)

    @property
    def root_matches(self) -> bool:
        if self.rebuilt_root is None or self.expected_root is None:
            return False
        return self.rebuilt_root.lower() == self.expected_root.lower()

    def get_failed_checks(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if check.is_error]

    def add_check(self, check: CheckResult) -> None:
        self.checks.append(check)
        if not check.ok:
            self.ok = False
