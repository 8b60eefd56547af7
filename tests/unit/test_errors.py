"""Tests for errors.py: error codes, context and chaining."""

import pytest

from blockrev.errors import (
    BlockrevError,
    BlockrevMergeConflictError,
    BlockrevNotFoundError,
    BlockrevValidationError,
    ErrorCode,
)


@pytest.mark.parametrize(
    ("cls", "code"),
    [
        (BlockrevValidationError, ErrorCode.VALIDATION_ERROR),
        (BlockrevNotFoundError, ErrorCode.NOT_FOUND),
        (BlockrevMergeConflictError, ErrorCode.MERGE_CONFLICT),
    ],
)
def test_subclass_codes(cls, code):
    err = cls("boom")
    assert isinstance(err, BlockrevError)
    assert err.code == code
    assert err.message == "boom"
    assert str(err) == "boom"
    assert err.context == {}


def test_context_preserved():
    err = BlockrevValidationError("bad", context={"path": "root.3", "reason": "unknown_type"})
    assert err.context["path"] == "root.3"


def test_cause_is_chained():
    cause = KeyError("id")
    err = BlockrevValidationError("missing id", cause=cause)
    assert err.cause is cause
    assert err.__cause__ is cause


def test_repr_includes_context():
    err = BlockrevNotFoundError("gone", context={"revision_id": "r9"})
    text = repr(err)
    assert text.startswith("BlockrevNotFoundError(code=")
    assert "message='gone'" in text
    assert text.endswith("context={'revision_id': 'r9'})")


def test_repr_without_context():
    assert "context" not in repr(BlockrevMergeConflictError("x"))


def test_error_code_is_string():
    assert ErrorCode.VALIDATION_ERROR == "VALIDATION_ERROR"
