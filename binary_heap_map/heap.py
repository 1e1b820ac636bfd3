from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import Any, Generic, Protocol, TypeVar, final

from loguru import logger


class SupportsOrdering(Protocol):
    def __lt__(self, value: Any, /) -> bool: ...

    def __gt__(self, value: Any, /) -> bool: ...


T = TypeVar("T")

Comparator = Callable[[T, T], int]
Identifier = Callable[[T], Hashable]


class InvalidArgument(TypeError):
    pass


def default_comparator(a: SupportsOrdering, b: SupportsOrdering) -> int:
    if a > b:
        return 1
    if a < b:
        return -1
    return 0


def default_identifier(x: T) -> T:
    return x


@final
class BinaryHeapMap(Generic[T]):
    """
    Binary heap that also tracks where every element lives.

    `comparator(a, b)` returns -1 when `a` goes before `b`, 1 when it goes after
    and 0 on a tie, so the default comparator gives a min-heap. `identifier`
    maps an element to the key its positions are filed under; several elements
    may share a key, in which case the first recorded position is the one that
    `index_of`, `edit` and `delete` act on.
    """

    def __init__(
        self,
        comparator: Comparator[T] | None = default_comparator,
        identifier: Identifier[T] | None = default_identifier,
    ):
        if comparator is None:
            comparator = default_comparator
        if identifier is None:
            identifier = default_identifier
        if not callable(comparator):
            raise InvalidArgument("Expected comparator to be a function")
        if not callable(identifier):
            raise InvalidArgument("Expected identifier to be a function")

        self.comparator: Comparator[T] = comparator
        self.identifier: Identifier[T] = identifier

        self.elements: list[T] = []
        self.indexes: dict[Hashable, list[int]] = {}

    @classmethod
    def from_elements(
        cls,
        elements: Iterable[T],
        comparator: Comparator[T] | None = default_comparator,
        identifier: Identifier[T] | None = default_identifier,
    ) -> "BinaryHeapMap[T]":
        heap = cls(comparator, identifier)
        for element in elements:
            heap.insert(element)
        return heap

    @property
    def size(self) -> int:
        return len(self.elements)

    @property
    def last_index(self) -> int:
        return self.size - 1

    def __len__(self) -> int:
        return len(self.elements)

    def __bool__(self) -> bool:
        return bool(self.elements)

    def __iter__(self) -> Iterator[T]:
        return iter(self.elements)

    def __contains__(self, element: T) -> bool:
        return self.identifier(element) in self.indexes

    def __repr__(self) -> str:
        return f"BinaryHeapMap({self.elements!r})"

    def get(self, index: int) -> T | None:
        if 0 <= index < len(self.elements):
            return self.elements[index]
        return None

    def peek(self) -> T | None:
        return self.elements[0] if self.elements else None

    def index_of(self, element: T) -> int:
        indexes = self.indexes.get(self.identifier(element))
        return indexes[0] if indexes else -1

    def insert(self, element: T):
        index = len(self.elements)
        self.elements.append(element)
        self._register(self.identifier(element), index)
        if index:
            self._sift_up(index)

    def extract(self) -> T | None:
        size = len(self.elements)
        if size == 0:
            return None

        if size == 1:
            root = self.elements.pop()
            self._unregister(self.identifier(root), 0)
            return root

        root = self.elements[0]
        last = self.elements.pop()
        self.elements[0] = last
        self._unregister(self.identifier(root), 0)
        self._move(self.identifier(last), size - 1, 0)

        self._sift_down(0)
        return root

    def insert_then_extract(self, element: T) -> T:
        """
        Push `element` and pop the root in one pass.

        When `element` would become the new root it is handed straight back and
        the heap is left alone; an empty heap behaves the same way.
        """
        if not self.elements:
            return element

        root = self.elements[0]
        if self.comparator(element, root) == -1:
            return element

        self.elements[0] = element
        self._unregister(self.identifier(root), 0)
        self._register(self.identifier(element), 0)

        self._sift_down(0)
        return root

    def edit(self, old_element: T, new_element: T) -> bool:
        old_key = self.identifier(old_element)
        indexes = self.indexes.get(old_key)
        if not indexes:
            logger.trace(f"edit: no element with key {old_key!r}")
            return False

        index = indexes[0]
        current = self.elements[index]
        new_key = self.identifier(new_element)

        self.elements[index] = new_element
        if new_key != old_key:
            self._unregister(old_key, index)
            self._register(new_key, index)

        cmp = self.comparator(current, new_element)
        if cmp == 1:
            self._sift_up(index)
        elif cmp == -1:
            self._sift_down(index)
        return True

    def delete(self, element: T) -> bool:
        key = self.identifier(element)
        indexes = self.indexes.get(key)
        if not indexes:
            logger.trace(f"delete: no element with key {key!r}")
            return False

        index = indexes[0]
        last_index = self.last_index
        if index != last_index:
            self._swap(index, last_index)

        removed = self.elements.pop()
        self._unregister(key, last_index)

        if index == last_index:
            return True

        cmp = self.comparator(removed, self.elements[index])
        if cmp == 1:
            self._sift_up(index)
        elif cmp == -1:
            self._sift_down(index)
        return True

    def check(self) -> bool:
        """
        Validate the heap order and the position index, logging every violation.
        """
        ok = True
        for i in range(1, len(self.elements)):
            parent = (i - 1) // 2
            if self.comparator(self.elements[parent], self.elements[i]) == 1:
                logger.error(f"Heap order violated: position {parent} sorts after its child {i}")
                ok = False

        seen: set[int] = set()
        for key, indexes in self.indexes.items():
            if not indexes:
                logger.error(f"Key {key!r} is registered with no positions")
                ok = False
            for i in indexes:
                if not 0 <= i < len(self.elements):
                    logger.error(f"Key {key!r} points at position {i}, outside the heap of size {len(self.elements)}")
                    ok = False
                    continue
                if i in seen:
                    logger.error(f"Position {i} is registered more than once")
                    ok = False
                seen.add(i)
                if self.identifier(self.elements[i]) != key:
                    logger.error(f"Position {i} is filed under {key!r} but holds key {self.identifier(self.elements[i])!r}")
                    ok = False

        if len(seen) != len(self.elements):
            missing = sorted(set(range(len(self.elements))) - seen)
            logger.error(f"Positions missing from the index: {missing}")
            ok = False
        return ok

    def _register(self, key: Hashable, index: int):
        self.indexes.setdefault(key, []).append(index)

    def _unregister(self, key: Hashable, index: int):
        indexes = self.indexes[key]
        indexes.remove(index)
        if not indexes:
            del self.indexes[key]

    def _move(self, key: Hashable, src: int, dst: int):
        indexes = self.indexes[key]
        indexes[indexes.index(src)] = dst

    def _swap(self, index1: int, index2: int):
        element1 = self.elements[index1]
        element2 = self.elements[index2]
        self.elements[index1] = element2
        self.elements[index2] = element1

        key1 = self.identifier(element1)
        key2 = self.identifier(element2)
        # same key: the set of positions is unchanged
        if key1 != key2:
            self._move(key1, index1, index2)
            self._move(key2, index2, index1)

    def _sift_up(self, index: int):
        while index > 0:
            parent_index = (index - 1) // 2
            if self.comparator(self.elements[parent_index], self.elements[index]) != 1:
                return
            self._swap(index, parent_index)
            index = parent_index

    def _sift_down(self, index: int):
        size = len(self.elements)
        while True:
            child_index = 2 * index + 1
            if child_index >= size:
                break
            right_index = child_index + 1
            if right_index < size and self.comparator(self.elements[right_index], self.elements[child_index]) == -1:
                child_index = right_index

            if self.comparator(self.elements[index], self.elements[child_index]) != 1:
                break
            self._swap(index, child_index)
            index = child_index

        # final fix-up for an inverted two-element heap
        if size == 2 and self.comparator(self.elements[0], self.elements[1]) == 1:
            self._swap(0, 1)
