from dataclasses import dataclass

from binary_heap_map import BinaryHeapMap


@dataclass(frozen=True)
class Task:
    name: str
    priority: int


def by_priority(a: Task, b: Task) -> int:
    if a.priority > b.priority:
        return 1
    if a.priority < b.priority:
        return -1
    return 0


def by_name(task: Task) -> str:
    return task.name


def max_first(a, b) -> int:
    return (a < b) - (a > b)


def sample_heap() -> BinaryHeapMap[int]:
    heap = BinaryHeapMap()
    for value in [3, 12, 1, 5, 7, 4, 9, 12]:
        heap.insert(value)
    return heap


def drain(heap: BinaryHeapMap) -> list:
    return [heap.extract() for _ in range(heap.size)]


def assert_consistent(heap: BinaryHeapMap):
    elements = heap.elements
    for i in range(1, len(elements)):
        assert heap.comparator(elements[(i - 1) // 2], elements[i]) in (-1, 0), (i, elements)

    positions = []
    for key, indexes in heap.indexes.items():
        assert indexes, key
        for i in indexes:
            assert heap.identifier(elements[i]) == key, (key, i, elements)
        positions.extend(indexes)
    assert sorted(positions) == list(range(len(elements)))
    assert heap.check()
