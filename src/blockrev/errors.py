"""Error hierarchy for blockrev.

Every public error class inherits from :class:`BlockrevError`.  Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

The diff, classification and merge functions never raise for expected
input.  Errors are confined to the wire boundary (parsing serialised block
trees), to revision lookups on a :class:`~blockrev.revision.Document`, and
to the opt-in :meth:`~blockrev.models.MergeResult.raise_for_conflicts`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error blockrev can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    MERGE_CONFLICT = "MERGE_CONFLICT"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class BlockrevError(Exception):
    """Base exception for all blockrev errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------

class BlockrevValidationError(BlockrevError):
    """A serialised block tree does not conform to the block schema.

    Context keys: ``path`` (structural path of the offending node),
    ``reason``, and ``value`` where useful.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class BlockrevNotFoundError(BlockrevError):
    """A requested revision does not exist in the document history.

    Context keys: ``revision_id``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class BlockrevMergeConflictError(BlockrevError):
    """A three-way merge produced conflicts and the caller asked to fail.

    Raised only by :meth:`MergeResult.raise_for_conflicts`; the merge itself
    always returns a result.

    Context keys: ``conflict_count``, ``paths``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MERGE_CONFLICT,
            message=message,
            context=context,
            cause=cause,
        )
