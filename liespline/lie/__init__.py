from .base import LieGroup
from .se2 import SE2
from .se3 import SE3
from .so2 import SO2
from .so3 import SO3
from .storage import (
    MappedBuffer,
    is_mappable_storage_like,
    is_modifiable_storage_like,
    is_storage_like,
)
from .utils import get_epsilon, skew

__all__ = (
    "LieGroup",
    "SE2",
    "SE3",
    "SO2",
    "SO3",
    "MappedBuffer",
    "is_storage_like",
    "is_modifiable_storage_like",
    "is_mappable_storage_like",
    "get_epsilon",
    "skew",
)
