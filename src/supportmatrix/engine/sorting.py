"""
Sort options.

A sort option is one of two variants:

- FieldSort: compare one text field, ascending or descending
- CustomSort: a named comparator from the closed Comparator enum

Sorting always works on a fresh copy of the full (filtered) input and is
stable, so equal items keep their input order.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Sequence, Tuple, Union


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


class Comparator(Enum):
    """Named custom orderings"""
    RECOGNIZED_VENDOR_FIRST = "recognized_vendor_first"  # Known vendors first, then product asc


@dataclass(frozen=True)
class FieldSort:
    id: str
    label: str
    field: str
    direction: SortDirection = SortDirection.ASC


@dataclass(frozen=True)
class CustomSort:
    id: str
    label: str
    comparator: Comparator


SortOption = Union[FieldSort, CustomSort]


@dataclass(frozen=True)
class SortContext:
    """Data a custom comparator may consult."""
    recognized_vendors: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_vendors(cls, vendors: Iterable[str]) -> 'SortContext':
        return cls(recognized_vendors=frozenset(v.casefold() for v in vendors))


BOARD_SORT_OPTIONS: Tuple[SortOption, ...] = (
    CustomSort(id="vendor-asc", label="Ruyi supported", comparator=Comparator.RECOGNIZED_VENDOR_FIRST),
    FieldSort(id="product-asc", label="Name (A-Z)", field="product", direction=SortDirection.ASC),
    FieldSort(id="product-desc", label="Name (Z-A)", field="product", direction=SortDirection.DESC),
)

SYSTEM_SORT_OPTIONS: Tuple[SortOption, ...] = (
    FieldSort(id="sys-asc", label="System (A-Z)", field="sys", direction=SortDirection.ASC),
    FieldSort(id="sys-desc", label="System (Z-A)", field="sys", direction=SortDirection.DESC),
    FieldSort(id="board-asc", label="Board (A-Z)", field="board_dir", direction=SortDirection.ASC),
    FieldSort(id="board-desc", label="Board (Z-A)", field="board_dir", direction=SortDirection.DESC),
)


def find_option(option_id: str, options: Sequence[SortOption]) -> SortOption:
    """
    Look up a sort option by id.

    Raises:
        KeyError: if no option has that id
    """
    for option in options:
        if option.id == option_id:
            return option
    raise KeyError(f"Unknown sort option: {option_id}")


def field_value(item: Any, name: str) -> str:
    """
    Text value of a field, looked up on the item and then on ``item.meta``
    (so boards and board records sort alike). Missing values sort as "".
    """
    value = getattr(item, name, None)
    if value is None and hasattr(item, 'meta'):
        value = getattr(item.meta, name, None)
    return "" if value is None else str(value)


def _text_key(value: str) -> str:
    return value.casefold()


def _recognized_vendor_key(context: SortContext) -> Callable[[Any], Tuple]:
    def key(item: Any) -> Tuple:
        vendor = field_value(item, 'vendor').strip().casefold()
        recognized = bool(vendor) and vendor in context.recognized_vendors
        return (0 if recognized else 1, _text_key(field_value(item, 'product')))
    return key


_COMPARATOR_KEYS: Dict[Comparator, Callable[[SortContext], Callable[[Any], Tuple]]] = {
    Comparator.RECOGNIZED_VENDOR_FIRST: _recognized_vendor_key,
}


def sort_items(items: Iterable[Any], option: SortOption, context: SortContext = SortContext()) -> List[Any]:
    """
    Sort items according to a sort option.

    Args:
        items: Boards, board records or system entries
        option: FieldSort or CustomSort
        context: Extra data for custom comparators

    Returns:
        A new, stably sorted list
    """
    items = list(items)
    if isinstance(option, CustomSort):
        return sorted(items, key=_COMPARATOR_KEYS[option.comparator](context))

    return sorted(
        items,
        key=lambda item: _text_key(field_value(item, option.field)),
        reverse=option.direction is SortDirection.DESC,
    )
