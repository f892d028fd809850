"""
Unit tests for libs.result
"""
import pytest

from libs.result import Error, Return


def test_ok_result():
    result = Return.ok("value")

    assert result.is_ok()
    assert not result.is_err()
    assert result.value == "value"
    assert result.error is None


def test_err_result():
    result = Return.err(Error("INVALID_CODE", "Invalid or expired verification code"))

    assert result.is_err()
    assert result.error.code == "INVALID_CODE"
    with pytest.raises(ValueError):
        result.value
