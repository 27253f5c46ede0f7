"""Name matching rules used to filter search candidates."""

from __future__ import annotations

from onlinesearch.domain.models import Person


def _initial(name: str) -> str:
    return name[:1]


def match_candidates(person: Person) -> tuple[str, ...]:
    """Strings a query is tested against, e.g. ``MarkNdaru`` or ``{M N}``."""

    first, last = person.first_name, person.last_name
    first_initial, last_initial = _initial(first), _initial(last)
    return (
        f"{first}{last}",
        f"{first} {last}",
        f"{{{first_initial}{last_initial}}}",
        f"{{{first_initial} {last_initial}}}",
    )


def matches(person: Person, query: str) -> bool:
    """Case-insensitive substring match against any of the name combinations."""

    needle = query.casefold()
    return any(needle in candidate.casefold() for candidate in match_candidates(person))


__all__ = ["match_candidates", "matches"]
