"""
Error Taxonomy and Verification Result Tests
Tests for core/schemas/errors.py and core/schemas/verification.py
"""
import pytest
from pydantic import ValidationError

from core.schemas.errors import (
    AllotreeError,
    AllotreeException,
    ClaimsFileException,
    ConstructionException,
    ErrorCodes,
    InputValidationException,
    MerkleProofException,
)
from core.schemas.verification import CheckResult, VerificationResult


class TestExceptions:
    """Tests for the exception hierarchy."""

    def test_all_derive_from_base(self):
        for exc in (
            InputValidationException("bad", code=ErrorCodes.INVALID_ADDRESS),
            ConstructionException("empty"),
            ClaimsFileException("broken"),
            MerkleProofException("missing"),
        ):
            assert isinstance(exc, AllotreeException)
            assert not exc.retryable

    def test_input_validation_details(self):
        exc = InputValidationException("bad cap", code=ErrorCodes.INVALID_CAPACITY, row=3, raw_value=-1)
        assert exc.details == {"row": 3, "raw_value": "-1"}
        assert exc.row == 3
        assert exc.raw_value == -1
        assert str(exc) == "bad cap"

    def test_default_codes(self):
        assert ConstructionException("x").code == ErrorCodes.EMPTY_LEAF_SET
        assert ClaimsFileException("x", key="k").details == {"key": "k"}
        assert MerkleProofException("x", leaf_index=4).details == {"leaf_index": 4}
        assert MerkleProofException("x").code == ErrorCodes.LEAF_NOT_FOUND

    def test_error_model(self):
        exc = ClaimsFileException("broken", key="0xabc")
        model = exc.to_error_model()
        assert isinstance(model, AllotreeError)
        assert model.code == ErrorCodes.MALFORMED_CLAIMS_FILE
        assert model.details == {"key": "0xabc"}
        assert model.message == "broken"

    def test_repr(self):
        assert repr(ConstructionException("empty")) == (
            "ConstructionException(code='EMPTY_LEAF_SET', message='empty')"
        )

    def test_error_model_forbids_extra(self):
        with pytest.raises(ValidationError):
            AllotreeError(code="X", message="m", unexpected=True)


class TestVerificationResult:
    """Tests for CheckResult / VerificationResult bookkeeping."""

    def test_add_failed_check_flips_ok(self):
        result = VerificationResult(ok=True)
        result.add_check(CheckResult.passed("a"))
        assert result.ok
        result.add_check(CheckResult.failed("b", "nope"))
        assert not result.ok
        assert result.error_count == 1
        assert result.passed_count == 1
        assert result.get_error_messages() == ["nope"]
        assert [c.check_id for c in result.get_failed_checks()] == ["b"]

    def test_severity_follows_outcome(self):
        assert CheckResult.passed("a").severity == "info"
        assert CheckResult.failed("b", "nope").is_error

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValidationError):
            CheckResult(check_id="w", ok=True, severity="warn", message="careful")

    def test_root_matches_ignores_case(self):
        root = "0x" + "ab" * 32
        result = VerificationResult(ok=True, expected_root=root, rebuilt_root=root.upper().replace("0X", "0x"))
        assert result.root_matches

    def test_root_matches_requires_both(self):
        assert not VerificationResult(ok=True, expected_root="0x" + "00" * 32).root_matches
