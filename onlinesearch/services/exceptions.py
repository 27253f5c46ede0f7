"""Domain-specific exceptions."""


class SearchError(Exception):
    pass


class ScopeClosedError(SearchError):
    pass
