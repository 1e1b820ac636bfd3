import argparse
import heapq
import statistics
import timeit
from collections.abc import Callable

import numpy as np
from loguru import logger

from .heap import BinaryHeapMap


def _time(
    run: Callable[[], object],
    prepare: Callable[[], object],
    n_warmup: int,
    n_step: int,
) -> tuple[float, float]:
    for _ in range(n_warmup):
        prepare()
        run()
    times = timeit.repeat(run, setup=prepare, number=1, repeat=n_step)
    mean = statistics.mean(times)
    std = statistics.stdev(times) if n_step > 1 else 0.0
    return mean, std


def benchmark(
    size: int = 10000,
    n_step: int = 5,
    n_warmup: int = 1,
    n_edit: int = 1000,
    seed: int = 0,
) -> dict[str, tuple[float, float]]:
    """
    Time the heap on a seeded random workload, with `heapq` as the baseline.

    Returns a mapping from workload name to (mean, std) seconds per run.
    """
    rng = np.random.default_rng(seed)
    values: list[int] = rng.integers(0, 4 * size, size).tolist()
    n_edit = min(n_edit, size)
    targets: list[int] = rng.choice(values, n_edit, replace=False).tolist()
    replacements: list[int] = rng.integers(0, 4 * size, n_edit).tolist()

    heap: BinaryHeapMap[int] = BinaryHeapMap()
    plain: list[int] = []

    def reset_empty():
        nonlocal heap, plain
        heap = BinaryHeapMap()
        plain = []

    def reset_full():
        nonlocal heap
        heap = BinaryHeapMap.from_elements(values)

    def heapq_push_pop():
        for value in values:
            heapq.heappush(plain, value)
        while plain:
            heapq.heappop(plain)

    def insert_extract():
        for value in values:
            heap.insert(value)
        while heap:
            heap.extract()

    def edit():
        for old, new in zip(targets, replacements):
            heap.edit(old, new)

    def delete():
        for target in targets:
            heap.delete(target)

    def push_pop():
        for value in replacements:
            heap.insert_then_extract(value)

    workloads = {
        "heapq push/pop": (heapq_push_pop, reset_empty),
        "insert/extract": (insert_extract, reset_empty),
        "edit": (edit, reset_full),
        "delete": (delete, reset_full),
        "insert_then_extract": (push_pop, reset_full),
    }

    results: dict[str, tuple[float, float]] = {}
    for name, (run, prepare) in workloads.items():
        logger.info(f"Benchmarking {name}, size={size}, steps={n_step}, warmup={n_warmup}")
        results[name] = _time(run, prepare, n_warmup, n_step)

    reset_full()
    for old, new in zip(targets, replacements):
        heap.edit(old, new)
    if not heap.check():
        raise RuntimeError("Heap invariants broken after edit workload")
    ordered = [heap.extract() for _ in range(len(heap))]
    if ordered != sorted(ordered):
        raise RuntimeError("Heap extracted elements out of order")

    return results


def positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {value}")
    return number


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Benchmark BinaryHeapMap against heapq")
    parser.add_argument("--size", type=positive_int, default=10000, help="elements per workload")
    parser.add_argument("--repeat", type=positive_int, default=5, help="timed runs per workload")
    parser.add_argument("--warmup", type=int, default=1, help="untimed runs per workload")
    parser.add_argument("--edits", type=positive_int, default=1000, help="edits/deletes per run")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args(argv)

    results = benchmark(
        size=args.size,
        n_step=args.repeat,
        n_warmup=args.warmup,
        n_edit=args.edits,
        seed=args.seed,
    )
    baseline, _ = results["heapq push/pop"]
    print(f"{'workload':<22}{'mean (ms)':>12}{'std (ms)':>12}{'vs heapq':>10}")
    for name, (mean, std) in results.items():
        print(f"{name:<22}{mean * 1e3:>12.3f}{std * 1e3:>12.3f}{mean / baseline:>9.2f}x")


if __name__ == "__main__":
    main()
