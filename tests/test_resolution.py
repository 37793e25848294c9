"""test suite for version resolution."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from runtimekit.resolution.resolver import resolve_version, sort_versions
from runtimekit.resolution.specifier import parse_specifier
from runtimekit.domain.errors import (
    InvalidVersionSpecifier,
    NoMatchingVersion,
    NoVersionsAvailable,
    VersionNotFound,
)

CATALOG = ["1.1.1", "3.3.3", "2.2.2"]


class TestResolveVersion:
    def test_empty_picks_highest(self):
        assert resolve_version("", CATALOG) == "3.3.3"

    def test_whitespace_is_empty(self):
        assert resolve_version("   ", CATALOG) == "3.3.3"

    def test_empty_catalog(self):
        with pytest.raises(NoVersionsAvailable) as exc_info:
            resolve_version("", [], runtime="ruby")
        assert "ruby" in str(exc_info.value)

    def test_numeric_not_lexical_ordering(self):
        assert resolve_version("", ["9.0.0", "10.0.0", "2.0.0"]) == "10.0.0"

    def test_shorter_versions_padded_with_zeros(self):
        assert resolve_version("", ["1.2", "1.1.9"]) == "1.2"
        assert resolve_version(">1.1.9", ["1.2", "1.1.9"]) == "1.2"

    def test_exact_present(self):
        assert resolve_version("2.2.2", CATALOG) == "2.2.2"

    def test_exact_missing(self):
        with pytest.raises(VersionNotFound) as exc_info:
            resolve_version("4.4.4", CATALOG)
        assert exc_info.value.version == "4.4.4"
        assert exc_info.value.available == ["3.3.3", "2.2.2", "1.1.1"]

    def test_exact_uses_string_equality(self):
        # "2.2" is numerically equal to "2.2.0" but is not listed
        with pytest.raises(VersionNotFound):
            resolve_version("2.2", ["2.2.0"])

    def test_wildcard(self):
        assert resolve_version("2.x.x", CATALOG) == "2.2.2"
        assert resolve_version("2.*", CATALOG) == "2.2.2"

    def test_constraint_unsatisfiable(self):
        with pytest.raises(NoMatchingVersion) as exc_info:
            resolve_version(">9.9.9", CATALOG)
        assert exc_info.value.specifier == ">9.9.9"

    def test_constraint_picks_highest_match(self):
        assert resolve_version("<3.0.0", CATALOG) == "2.2.2"
        assert resolve_version(">=1.0, <3", CATALOG) == "2.2.2"
        assert resolve_version(">=1.0 <2", CATALOG) == "1.1.1"

    def test_caret_and_tilde(self):
        catalog = ["1.2.3", "1.2.9", "1.3.0", "2.0.0"]
        assert resolve_version("^1.2.3", catalog) == "1.3.0"
        assert resolve_version("~1.2.3", catalog) == "1.2.9"

    def test_not_equal_wildcard(self):
        assert resolve_version("!=3.x", CATALOG) == "2.2.2"

    def test_not_found_and_no_match_are_distinct(self):
        assert not issubclass(VersionNotFound, NoMatchingVersion)
        assert not issubclass(NoMatchingVersion, VersionNotFound)

    def test_unparseable_entries_ignored(self):
        assert resolve_version("", ["1.0.0", "nightly", "2.0.0"]) == "2.0.0"
        with pytest.raises(NoVersionsAvailable):
            resolve_version("", ["nightly"])

    def test_invalid_specifier(self):
        with pytest.raises(InvalidVersionSpecifier):
            resolve_version("latest", CATALOG)

    def test_catalog_order_irrelevant(self):
        assert resolve_version("", reversed(CATALOG)) == "3.3.3"


class TestParseSpecifier:
    def test_empty(self):
        assert parse_specifier("").is_empty

    def test_exact(self):
        spec = parse_specifier("3.1.4")
        assert spec.exact == "3.1.4"
        assert spec.constraint is None

    def test_wildcard_becomes_prefix_match(self):
        assert str(parse_specifier("2.x.x").constraint) == "==2.*"

    def test_bare_wildcard_matches_everything(self):
        spec = parse_specifier("*")
        assert spec.constraint is not None
        assert spec.constraint.contains("99.0")

    def test_operator_on_wildcard(self):
        assert str(parse_specifier(">2.x").constraint) == ">=3"
        assert str(parse_specifier("<=2.x").constraint) == "<3"

    def test_non_trailing_wildcard_rejected(self):
        with pytest.raises(InvalidVersionSpecifier):
            parse_specifier("2.x.1")

    def test_caret_zero_major(self):
        assert str(parse_specifier("^0.2.3").constraint) == "<0.3,>=0.2.3"

    def test_invalid_specifier_is_value_error(self):
        with pytest.raises(ValueError):
            parse_specifier(">=abc")


class TestSortVersions:
    def test_highest_first(self):
        assert sort_versions(CATALOG) == ["3.3.3", "2.2.2", "1.1.1"]

    def test_drops_unparseable(self):
        assert sort_versions(["1.0", "nightly"]) == ["1.0"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
