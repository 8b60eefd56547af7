"""Tests for versioning.py: parse, format and increment semantic versions."""

import pytest

from blockrev.models import ChangeType, SemVer
from blockrev.versioning import format_version, increment_version, next_version, parse_version


class TestParseVersion:
    @pytest.mark.parametrize("raw", [None, "", "garbage", "..", "x.y.z"])
    def test_missing_or_unparsable_defaults(self, raw):
        assert parse_version(raw) == SemVer(1, 0, 0)

    def test_well_formed(self):
        assert parse_version("2.5.1") == SemVer(2, 5, 1)

    def test_missing_segments_take_defaults(self):
        assert parse_version("3") == SemVer(3, 0, 0)
        assert parse_version("3.4") == SemVer(3, 4, 0)

    def test_invalid_segment_falls_back_positionally(self):
        assert parse_version("4.x.7") == SemVer(4, 0, 7)
        assert parse_version("a.2.3") == SemVer(1, 2, 3)

    def test_zero_major_becomes_one(self):
        assert parse_version("0.4.2") == SemVer(1, 4, 2)

    def test_negative_segments_rejected(self):
        assert parse_version("2.-1.3") == SemVer(2, 0, 3)

    def test_extra_segments_ignored(self):
        assert parse_version("1.2.3.4") == SemVer(1, 2, 3)

    def test_non_ascii_digits_rejected(self):
        assert parse_version("2.².1") == SemVer(2, 0, 1)


class TestFormatVersion:
    def test_round_trip(self):
        assert format_version(parse_version("2.5.1")) == "2.5.1"

    def test_str_matches_format(self):
        assert str(SemVer(7, 0, 3)) == format_version(SemVer(7, 0, 3))


class TestIncrementVersion:
    base = SemVer(1, 2, 3)

    def test_major(self):
        assert increment_version(self.base, ChangeType.MAJOR) == SemVer(2, 0, 0)

    def test_minor(self):
        assert increment_version(self.base, ChangeType.MINOR) == SemVer(1, 3, 0)

    def test_patch(self):
        assert increment_version(self.base, ChangeType.PATCH) == SemVer(1, 2, 4)

    def test_none(self):
        assert increment_version(self.base, ChangeType.NONE) == SemVer(1, 2, 3)

    def test_accepts_string_kind(self):
        assert increment_version(self.base, "minor") == SemVer(1, 3, 0)

    def test_input_not_mutated(self):
        increment_version(self.base, ChangeType.MAJOR)
        assert self.base == SemVer(1, 2, 3)

    def test_never_decreases(self):
        for kind in ChangeType:
            assert increment_version(self.base, kind) >= self.base


class TestNextVersion:
    def test_from_string(self):
        assert next_version("1.9.9", ChangeType.MINOR) == "1.10.0"

    def test_from_missing(self):
        assert next_version(None, ChangeType.PATCH) == "1.0.1"
