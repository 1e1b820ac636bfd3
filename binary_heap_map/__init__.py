import importlib.metadata

__version__ = importlib.metadata.version("binary_heap_map")

from .heap import BinaryHeapMap, InvalidArgument, default_comparator, default_identifier
from .benchmark import benchmark
