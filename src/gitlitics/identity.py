"""Author identity resolution: map a commit signature to a canonical author key."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .errors import ConfigError

IDENTITY_FIELDS = ("name", "mail")


class IdentityResolver:
    """Alias table and identity field bound together for a whole run.

    The candidate key is the email when ``identity_field`` is ``"mail"`` and
    the name otherwise. The first alias entry whose canonical key or alias
    list contains the candidate wins; unknown candidates map to themselves.
    Matching is exact, without case folding.
    """

    def __init__(
        self,
        identity_field: str = "name",
        aliases: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        if identity_field not in IDENTITY_FIELDS:
            raise ConfigError(
                f"author key must be one of {', '.join(IDENTITY_FIELDS)}, got {identity_field!r}"
            )
        self.identity_field = identity_field
        self.aliases: dict[str, tuple[str, ...]] = {
            canonical: tuple(names) for canonical, names in (aliases or {}).items()
        }
        self._lookup: dict[str, str] = {}
        for canonical, names in self.aliases.items():
            self._lookup.setdefault(canonical, canonical)
            for alias in names:
                self._lookup.setdefault(alias, canonical)

    def resolve(self, name: str, email: str) -> str:
        candidate = email if self.identity_field == "mail" else name
        return self._lookup.get(candidate, candidate)

    def __repr__(self) -> str:
        return f"IdentityResolver(identity_field={self.identity_field!r}, aliases={len(self.aliases)})"


def resolve_author(
    name: str,
    email: str,
    aliases: Mapping[str, Sequence[str]],
    identity_field: str = "name",
) -> str:
    """One-off form of :meth:`IdentityResolver.resolve`."""
    return IdentityResolver(identity_field, aliases).resolve(name, email)
