"""Coordinate buffers backing group elements.

A group element either owns a private copy of its coordinates or maps a buffer
owned by someone else. A mapped element aliases that memory: writes through the
element show up in the buffer and vice versa, and the buffer must outlive the
element.

The capability predicates mirror what an element needs from its buffer:

* storage-like: `size` numeric scalars can be read by index.
* modifiable-storage-like: the scalars can also be written in place.
* mappable-storage-like: the scalars live in one contiguous floating point
  block that can be aliased without copying.
"""

from typing import Any, NamedTuple

import numpy as np

from ..exceptions import UnsupportedStorage


class MappedBuffer(NamedTuple):
    """Marks a buffer to be aliased by a group element instead of copied."""

    buffer: Any
    """Externally owned memory, e.g. a numpy array or a writable memoryview."""
    offset: int = 0
    """Index of the first coordinate inside the flattened buffer."""


def _as_array(obj: Any) -> Any:
    try:
        return np.asarray(obj)
    except (TypeError, ValueError):
        return None


def is_storage_like(obj: Any, size: int) -> bool:
    """Whether `obj` gives read access to exactly `size` numeric scalars."""
    arr = _as_array(obj)
    if arr is None:
        return False
    return arr.shape == (size,) and np.issubdtype(arr.dtype, np.number)


def is_modifiable_storage_like(obj: Any, size: int) -> bool:
    """Whether `obj` is storage-like and can be written in place."""
    return (
        isinstance(obj, np.ndarray)
        and is_storage_like(obj, size)
        and bool(obj.flags.writeable)
    )


def is_mappable_storage_like(obj: Any, size: int, offset: int = 0) -> bool:
    """Whether `size` scalars starting at `offset` can be aliased in `obj`."""
    try:
        view = memoryview(obj)
    except TypeError:
        return False
    if not view.c_contiguous:
        return False
    arr = _as_array(obj)
    if arr is None or not np.issubdtype(arr.dtype, np.floating):
        return False
    return 0 <= offset and offset + size <= arr.size


def own(values: Any, size: int, name: str = "parameters") -> np.ndarray:
    """Returns a private copy of `values` as a floating point vector."""
    arr = _as_array(values)
    if arr is None or not np.issubdtype(arr.dtype, np.number):
        raise UnsupportedStorage("storage-like", size, type(values))
    if arr.shape != (size,):
        raise ValueError(
            f"Expected {name} to be a length {size} vector but got shape {arr.shape}."
        )
    if not np.issubdtype(arr.dtype, np.floating):
        return arr.astype(np.float64)
    return np.array(arr, copy=True)


def map_buffer(buffer: Any, size: int, offset: int = 0) -> np.ndarray:
    """Returns a view of `size` scalars of `buffer` starting at `offset`."""
    if not is_mappable_storage_like(buffer, size, offset):
        raise UnsupportedStorage("mappable-storage-like", size, type(buffer))
    # C-contiguous, so reshape(-1) is a view and never a copy.
    flat = np.asarray(buffer).reshape(-1)
    return flat[offset : offset + size]


def adopt(value: Any, size: int, name: str = "parameters") -> np.ndarray:
    """Resolves a constructor argument into the buffer an element will hold."""
    if isinstance(value, MappedBuffer):
        return map_buffer(value.buffer, size, value.offset)
    return own(value, size, name)


def owns_data(arr: np.ndarray) -> bool:
    """Whether `arr` was produced by `own` rather than `map_buffer`."""
    return arr.base is None
