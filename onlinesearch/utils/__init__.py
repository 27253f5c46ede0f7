from onlinesearch.utils.scope import TaskScope
from onlinesearch.utils.state import StateCell, Subscription

__all__ = ["StateCell", "Subscription", "TaskScope"]
