"""Tests for path normalization."""

import os

from vinylfile import normalize
from vinylfile.normalize import remove_trailing_sep


class TestNormalize:
    """Test the path normalizer."""

    def test_leaves_empty_string_unmodified(self):
        """Test that the empty string is not turned into '.'."""
        assert normalize("") == ""

    def test_applies_normpath_for_everything_else(self):
        """Test that dot segments and repeated separators are resolved."""
        value = "/foo//../bar/baz"
        assert normalize(value) == os.path.normpath(value)

    def test_removes_trailing_separator(self):
        """Test that a trailing separator is stripped."""
        assert normalize("/test/foo/../foo/") == os.path.normpath("/test/foo")

    def test_keeps_root(self):
        """Test that the root path survives separator stripping."""
        assert normalize(os.sep) == os.sep

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        for value in ["", "/", "a/b/../c/", "./x", "/a//b/./c/", "../up/", "rel"]:
            once = normalize(value)
            assert normalize(once) == once


class TestRemoveTrailingSep:
    """Test trailing separator removal."""

    def test_strips_repeated_separators(self):
        """Test that every trailing separator is removed."""
        assert remove_trailing_sep("foo" + os.sep * 3) == "foo"

    def test_short_strings_untouched(self):
        """Test that empty and single-character paths are returned as-is."""
        assert remove_trailing_sep("") == ""
        assert remove_trailing_sep(os.sep) == os.sep
