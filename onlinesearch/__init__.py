"""Debounced, observable people search."""

from onlinesearch.domain.models import Person
from onlinesearch.services.matching import matches
from onlinesearch.services.search import SearchStore, filter_people
from onlinesearch.utils.scope import TaskScope

__all__ = ["Person", "SearchStore", "TaskScope", "filter_people", "matches"]
