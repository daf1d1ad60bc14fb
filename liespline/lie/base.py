import abc
from typing import Any, Optional, Union, overload

import numpy as np
from typing_extensions import Self

from ..exceptions import ReadOnlyStorage
from . import storage
from .utils import get_epsilon


class LieGroup(abc.ABC):
    """Interface definition for Lie groups.

    Concrete groups provide storage and a minimal set of primitives (identity,
    composition, inverse, exp, log, adjoint, bracket and the right Jacobians of
    exp). Everything else, e.g. plus and minus operators, left Jacobians,
    comparisons and casting, is derived here from those primitives.

    Attributes:
        matrix_dim: Dimension of the square matrix output.
        parameters_dim: Dimension of the underlying parameters.
        tangent_dim: Dimension of the tangent space.
        space_dim: Dimension of the coordinates that can be transformed.
    """

    matrix_dim: int
    parameters_dim: int
    tangent_dim: int
    space_dim: int

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        is_abstract = any(
            getattr(getattr(cls, name, None), "__isabstractmethod__", False)
            for name in dir(cls)
        )
        if is_abstract:
            return
        for attr in ("parameters_dim", "tangent_dim"):
            value = getattr(cls, attr, None)
            if not isinstance(value, int) or value <= 0:
                raise TypeError(
                    f"{cls.__name__} must declare a positive integer `{attr}`, "
                    f"got {value!r}"
                )

    @overload
    def __matmul__(self, other: Self) -> Self: ...

    @overload
    def __matmul__(self, other: np.ndarray) -> np.ndarray: ...

    def __matmul__(self, other: Union[Self, np.ndarray]) -> Union[Self, np.ndarray]:
        """Overload of the @ operator to compose transformations or apply to points."""
        if isinstance(other, np.ndarray):
            return self.apply(target=other)
        if type(other) is not type(self):
            return NotImplemented
        return self.multiply(other=other)

    def __imatmul__(self, other: Self) -> Self:
        """In-place composition, writing into this element's buffer."""
        if type(other) is not type(self):
            return NotImplemented
        self._assign(self.multiply(other=other).parameters())
        return self

    def __add__(self, other: np.ndarray) -> Self:
        """Right plus: `g + a := g @ exp(a)`."""
        return self.rplus(other)

    def __iadd__(self, other: np.ndarray) -> Self:
        """In-place right plus, writing into this element's buffer."""
        self._assign(self.rplus(other).parameters())
        return self

    def __sub__(self, other: Self) -> np.ndarray:
        """Right minus: `g1 - g2 := log(g2.inverse() @ g1)`."""
        if type(other) is not type(self):
            return NotImplemented
        return self.rminus(other)

    # Factory methods.

    @classmethod
    @abc.abstractmethod
    def identity(cls) -> Self:
        """Returns the identity element of the group."""
        raise NotImplementedError

    @classmethod
    @abc.abstractmethod
    def from_matrix(cls, matrix: np.ndarray) -> Self:
        """Constructs a group member from its matrix representation."""
        raise NotImplementedError

    @classmethod
    @abc.abstractmethod
    def sample_uniform(cls) -> Self:
        """Samples a random element. Seed with `np.random.seed`."""
        raise NotImplementedError

    @classmethod
    def map(cls, buffer: Any, offset: int = 0) -> Self:
        """Creates an element aliasing `buffer` instead of copying it.

        The element reads and writes `cls.parameters_dim` scalars of `buffer`
        starting at `offset`. The buffer must be a C-contiguous floating point
        block and must outlive the returned element.
        """
        return cls(storage.MappedBuffer(buffer, offset))  # type: ignore[call-arg]

    # Accessors.

    @abc.abstractmethod
    def as_matrix(self) -> np.ndarray:
        """Returns the transformation as a matrix."""
        raise NotImplementedError

    @abc.abstractmethod
    def parameters(self) -> np.ndarray:
        """Returns the underlying parameter representation."""
        raise NotImplementedError

    def is_owning(self) -> bool:
        """Whether the element owns its buffer, as opposed to mapping one."""
        return storage.owns_data(self.parameters())

    def copy(self) -> Self:
        """Returns an owning deep copy."""
        return type(self)(self.parameters())  # type: ignore[call-arg]

    def cast(self, dtype: Union[np.dtype, type]) -> Self:
        """Returns an owning copy with coordinates converted to `dtype`."""
        return type(self)(self.parameters().astype(dtype))  # type: ignore[call-arg]

    def isapprox(self, other: Self, eps: Optional[float] = None) -> bool:
        """Compares coordinates with a tolerance relative to their scale.

        Passes iff `||c1 - c2|| <= eps * min(||c1||, ||c2||)` where `c1`, `c2`
        are the parameter vectors. `eps` defaults to the small-angle cutoff of
        the scalar type.
        """
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )
        c1 = self.parameters()
        c2 = other.parameters()
        if c1.dtype != c2.dtype:
            raise TypeError(f"Scalar types differ: {c1.dtype} and {c2.dtype}")
        if eps is None:
            eps = get_epsilon(c1.dtype)
        n12 = np.linalg.norm(c1 - c2)
        return bool(n12 <= eps * min(np.linalg.norm(c1), np.linalg.norm(c2)))

    # Mutators.

    def _assign(self, values: np.ndarray) -> None:
        buffer = self.parameters()
        if not storage.is_modifiable_storage_like(buffer, self.parameters_dim):
            raise ReadOnlyStorage(type(self).__name__)
        buffer[:] = values

    def set_identity(self) -> None:
        """Overwrites the element with the identity, in place."""
        self._assign(type(self).identity().parameters())

    def set_random(self) -> None:
        """Overwrites the element with a random sample, in place."""
        self._assign(type(self).sample_uniform().parameters())

    # Operations.

    @abc.abstractmethod
    def apply(self, target: np.ndarray) -> np.ndarray:
        """Applies the group action to a point."""
        raise NotImplementedError

    @abc.abstractmethod
    def multiply(self, other: Self) -> Self:
        """Composes this transformation with another transformation."""
        raise NotImplementedError

    @classmethod
    @abc.abstractmethod
    def exp(cls, tangent: np.ndarray) -> Self:
        """Computes the exponential map from the tangent space to the group, i.e., expm(wedge(tangent))."""
        raise NotImplementedError

    @abc.abstractmethod
    def log(self) -> np.ndarray:
        """Computes the logarithmic map from the group to the tangent space, i.e., vee(logm(transformation matrix))."""
        raise NotImplementedError

    @abc.abstractmethod
    def adjoint(self) -> np.ndarray:
        """Computes the adjoint representation `Ad` of the transformation."""
        raise NotImplementedError

    @classmethod
    @abc.abstractmethod
    def ad(cls, tangent: np.ndarray) -> np.ndarray:
        """Computes the Lie bracket matrix, i.e., `ad(a) @ b == [a, b]`."""
        raise NotImplementedError

    @abc.abstractmethod
    def inverse(self) -> Self:
        """Computes the inverse of the transformation."""
        raise NotImplementedError

    @abc.abstractmethod
    def normalize(self) -> Self:
        """Normalizes the transformation parameters and returns the normalized transformation."""
        raise NotImplementedError

    # Plus and minus operators.

    # Eqn. 25.
    def rplus(self, other: np.ndarray) -> Self:
        """Right plus operator: adds a tangent vector to the transformation."""
        return self @ self.exp(other)

    # Eqn. 26.
    def rminus(self, other: Self) -> np.ndarray:
        """Right minus operator: computes the tangent vector difference between two transformations."""
        return (other.inverse() @ self).log()

    # Eqn. 27.
    def lplus(self, other: np.ndarray) -> Self:
        """Left plus operator: adds a tangent vector to the transformation."""
        return self.exp(other) @ self

    # Eqn. 28.
    def lminus(self, other: Self) -> np.ndarray:
        """Left minus operator: computes the tangent vector difference between two transformations."""
        return (self @ other.inverse()).log()

    def plus(self, other: np.ndarray) -> Self:
        """Alias for the right plus operator."""
        return self.rplus(other)

    def minus(self, other: Self) -> np.ndarray:
        """Alias for the right minus operator."""
        return self.rminus(other)

    # Jacobians.

    @classmethod
    @abc.abstractmethod
    def dr_exp(cls, tangent: np.ndarray) -> np.ndarray:
        """Computes the right Jacobian of the exponential map."""
        raise NotImplementedError

    @classmethod
    @abc.abstractmethod
    def dr_expinv(cls, tangent: np.ndarray) -> np.ndarray:
        """Computes the inverse of the right Jacobian of the exponential map."""
        raise NotImplementedError

    # Eqn. 46.
    @classmethod
    def dl_exp(cls, tangent: np.ndarray) -> np.ndarray:
        """Computes the left Jacobian of the exponential map."""
        return cls.exp(tangent).adjoint() @ cls.dr_exp(tangent)

    @classmethod
    def dl_expinv(cls, tangent: np.ndarray) -> np.ndarray:
        """Computes the inverse of the left Jacobian."""
        return -cls.ad(tangent) + cls.dr_expinv(tangent)

    # Eqn. 79.
    def jlog(self) -> np.ndarray:
        """Computes the Jacobian of the logarithmic map."""
        return self.dr_expinv(self.log())
