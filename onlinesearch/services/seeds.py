"""Startup seed data."""

from __future__ import annotations

from onlinesearch.domain.models import Person

DEFAULT_PEOPLE: tuple[Person, ...] = (
    Person(first_name="Mark", last_name="Ndaru"),
    Person(first_name="Darius", last_name="Nyaga"),
    Person(first_name="Anthony", last_name="Mwalili"),
    Person(first_name="Steve", last_name="Magu"),
)


__all__ = ["DEFAULT_PEOPLE"]
