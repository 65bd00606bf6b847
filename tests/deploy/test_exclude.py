"""Tests for prefix-based exclusion."""

from __future__ import annotations

import itertools

import pytest

from revdeploy.deploy.exclude import ExcludeFilter


class TestExcludeFilter:
    """Tests for ExcludeFilter."""

    def test_empty_excludes_nothing(self) -> None:
        """Without prefixes every path is kept."""
        f = ExcludeFilter()
        assert f.is_excluded("a.php") is False
        assert not f

    @pytest.mark.parametrize(
        ("path", "excluded"),
        [
            ("docs/readme.md", True),
            ("docs.html", True),
            ("src/docs/readme.md", False),
            ("b.html", True),
            ("ab.html", False),
        ],
    )
    def test_plain_prefix_match(self, path: str, excluded: bool) -> None:
        """Matching is a plain startswith on the whole path."""
        f = ExcludeFilter(["docs", "b."])
        assert f.is_excluded(path) is excluded

    def test_directory_prefix(self) -> None:
        """A trailing slash restricts the prefix to a directory."""
        f = ExcludeFilter(["docs/"])
        assert f.is_excluded("docs/a.md") is True
        assert f.is_excluded("docs.html") is False

    def test_order_independent(self) -> None:
        """Reordering prefixes never changes the result."""
        prefixes = ["tests/", "b.", "README"]
        paths = ["tests/x.py", "b.html", "README.md", "index.php", "lib/b.php"]
        expected = [ExcludeFilter(prefixes).is_excluded(p) for p in paths]

        for order in itertools.permutations(prefixes):
            assert [ExcludeFilter(order).is_excluded(p) for p in paths] == expected
