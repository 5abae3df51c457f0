from .models import DateRange, ListQuery, ListResult
from .dates import MIN_DATE_KEY, date_sort_key
from .strategies import (
    DateSortFallbackStrategy,
    ListEndpoint,
    ListStrategy,
    ServerPagedStrategy,
    default_payload,
    parse_list_envelope,
)
from .controller import ListController
from .registry import ControllerRegistry, controller_registry, get_controller_registry

__all__ = [
    "DateRange",
    "ListQuery",
    "ListResult",
    "MIN_DATE_KEY",
    "date_sort_key",
    "DateSortFallbackStrategy",
    "ListEndpoint",
    "ListStrategy",
    "ServerPagedStrategy",
    "default_payload",
    "parse_list_envelope",
    "ListController",
    "ControllerRegistry",
    "controller_registry",
    "get_controller_registry",
]
