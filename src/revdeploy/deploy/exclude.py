"""Path exclusion for deployments."""

from __future__ import annotations

from collections.abc import Iterable


class ExcludeFilter:
    """Prefix-based exclusion.

    A path is excluded if it starts with any configured prefix. Matching is
    plain string comparison: "docs" excludes "docs/a.md" and also
    "docs.html". Use "docs/" to exclude the directory only.
    """

    def __init__(self, prefixes: Iterable[str] = ()) -> None:
        self._prefixes = tuple(prefixes)

    @property
    def prefixes(self) -> tuple[str, ...]:
        """Return the configured prefixes."""
        return self._prefixes

    def is_excluded(self, path: str) -> bool:
        """Check whether a path matches any prefix."""
        return path.startswith(self._prefixes) if self._prefixes else False

    def __bool__(self) -> bool:
        return bool(self._prefixes)

    def __repr__(self) -> str:
        return f"ExcludeFilter({list(self._prefixes)!r})"
