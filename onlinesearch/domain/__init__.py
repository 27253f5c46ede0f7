from onlinesearch.domain.models import Person

__all__ = ["Person"]
