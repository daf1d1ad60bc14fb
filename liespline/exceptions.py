"""Exceptions specific to liespline."""


class LieSplineError(Exception):
    """Base class for liespline exceptions."""


class InvalidWindowSize(LieSplineError, ValueError):
    """Exception raised when a spline window has the wrong number of elements."""

    def __init__(self, what: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        message = f"bspline: {what} must be of size {expected}, got {actual}"
        super().__init__(message)


class InvalidDegree(LieSplineError, ValueError):
    """Exception raised when a spline degree is negative."""

    def __init__(self, degree: int):
        super().__init__(f"Spline degree must be >= 0, got {degree}")


class InvalidKnotSpacing(LieSplineError, ValueError):
    """Exception raised when the knot spacing of a spline is not positive."""

    def __init__(self, dt: float):
        super().__init__(f"Knot spacing dt must be > 0, got {dt}")


class UnsupportedStorage(LieSplineError, TypeError):
    """Exception raised when a buffer lacks a capability required by a group."""

    def __init__(self, capability: str, size: int, buffer_type: type):
        message = (
            f"Buffer of type {buffer_type.__name__} is not {capability} "
            f"with {size} scalars"
        )
        super().__init__(message)


class ReadOnlyStorage(LieSplineError, ValueError):
    """Exception raised when mutating an element backed by a read-only buffer."""

    def __init__(self, group_name: str):
        super().__init__(f"{group_name} is backed by a read-only buffer")
