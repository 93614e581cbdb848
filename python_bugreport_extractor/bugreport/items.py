import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import DefaultDict, Dict, Iterator, List, Optional, Pattern, Union


class Item:
    """
    Base class for everything a parser stores in an ItemList.
    The type is a fixed string naming the section or crash class
    that produced the item, e.g. "MEMORY INFO" or "ANR".
    """

    type: str = ""

    def freeze(self) -> None:
        pass


class GenericMapItem(dict, Item):
    """An insertion-ordered key/value item, used by every tabular section and crash record"""

    def __init__(self, item_type: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.type = item_type
        self._frozen = False

    def freeze(self) -> None:
        self._frozen = True

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError(f"{self.type} item is already committed")

    def __setitem__(self, key, value):
        self._check_mutable()
        super().__setitem__(key, value)

    def __delitem__(self, key):
        self._check_mutable()
        super().__delitem__(key)

    def update(self, *args, **kwargs):
        self._check_mutable()
        super().update(*args, **kwargs)

    def setdefault(self, key, default=None):
        self._check_mutable()
        return super().setdefault(key, default)

    def pop(self, *args):
        self._check_mutable()
        return super().pop(*args)

    def popitem(self):
        self._check_mutable()
        return super().popitem()

    def clear(self):
        self._check_mutable()
        super().clear()

    def __eq__(self, other):
        if isinstance(other, GenericMapItem):
            return self.type == other.type and dict.__eq__(self, other)
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __reduce__(self):
        # Rebuild through __init__, then restore the frozen flag
        return self.__class__, (self.type, dict(self)), {"_frozen": self._frozen}

    def __repr__(self):
        return f"GenericMapItem(type={self.type!r}, {dict.__repr__(self)})"


@dataclass(frozen=True)
class BugreportHeaderItem(Item):
    """Facts from the dumpstate preamble that precedes the first section"""

    timestamp: Optional[datetime] = None
    fingerprint: str = ""
    product: str = ""
    version: str = ""
    uptime: Optional[timedelta] = None
    type: str = "BUGREPORT"


class ItemList:
    """
    Append-only store of parsed items, in the order they were committed.
    Items are also indexed by type for quick retrieval.
    """

    def __init__(self):
        self._items: List[Item] = []
        self._by_type: DefaultDict[str, List[Item]] = defaultdict(list)

    def add_item(self, item: Item) -> None:
        if item is None:
            raise TypeError("Cannot add None to an ItemList")
        item.freeze()
        self._items.append(item)
        self._by_type[item.type].append(item)

    def get_items(self) -> List[Item]:
        return list(self._items)

    def items_of_type(self, item_type: str) -> List[Item]:
        return list(self._by_type.get(item_type, []))

    def first_item_of_type(self, item_type: str) -> Optional[Item]:
        items = self._by_type.get(item_type)
        return items[0] if items else None

    def count(self, item_type: str) -> int:
        return len(self._by_type.get(item_type, []))

    def get_items_by_type(self, type_filter: Union[str, Pattern[str]]) -> List[Item]:
        """
        Return every item whose type fully matches a regular expression.

        Args:
            type_filter: a regex string or a compiled pattern, e.g. ".* CRASH"
        Raises:
            re.error: if the regex string is invalid
        """
        pattern = re.compile(type_filter) if isinstance(type_filter, str) else type_filter
        return [item for item in self._items if pattern.fullmatch(item.type)]

    def get_first_item_by_type(
        self, type_filter: Union[str, Pattern[str]]
    ) -> Optional[Item]:
        pattern = re.compile(type_filter) if isinstance(type_filter, str) else type_filter
        return next(
            (item for item in self._items if pattern.fullmatch(item.type)), None
        )

    def types(self) -> Dict[str, int]:
        """Item counts per type, in order of first appearance"""
        return {item_type: len(items) for item_type, items in self._by_type.items()}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(list(self._items))

    def __repr__(self):
        return f"ItemList({self._items!r})"
