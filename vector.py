# vector.py
"""
Immutable 2D vector value type.

Vector2D is used at every seam where a single point or direction crosses the
kernel boundary: particle records, spawn requests and pointer events. The
population itself is held in NumPy arrays (see particle.py); the array
kernels in forces.py follow the same zero-length conventions documented here.
"""
import math
from dataclasses import dataclass
from typing import Iterator, Tuple

# --- Data Contracts ---
#
# class Vector2D:
#   - Fields: x: float, y: float (coerced to float on construction).
#   - Invariants:
#     - Instances are immutable; every operation returns a new Vector2D.
#     - magnitude() is recomputed from x and y on every call, never cached.
#     - magnitude() >= 0 and is finite for finite x, y.
#   - Zero-length conventions:
#     - normalized() of the zero vector is the zero vector.
#     - with_magnitude(s) of the zero vector treats it as pointing along
#       (1, 0), i.e. returns Vector2D(s, 0).


@dataclass(frozen=True)
class Vector2D:
    """A 2D vector with value semantics."""
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'x', float(self.x))
        object.__setattr__(self, 'y', float(self.y))

    @classmethod
    def zero(cls) -> "Vector2D":
        return cls(0.0, 0.0)

    @classmethod
    def from_sequence(cls, values) -> "Vector2D":
        """Builds a vector from any 2-element sequence such as a list or tuple."""
        x, y = values
        return cls(x, y)

    # Arithmetic
    def add(self, other: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: "Vector2D") -> "Vector2D":
        """Returns self - other."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def scale(self, scalar: float) -> "Vector2D":
        return Vector2D(self.x * scalar, self.y * scalar)

    def dot(self, other: "Vector2D") -> float:
        return self.x * other.x + self.y * other.y

    def reversed(self) -> "Vector2D":
        return Vector2D(-self.x, -self.y)

    # Length
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y)

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalized(self) -> "Vector2D":
        """
        Returns the unit vector in the same direction.

        The zero vector has no direction and normalizes to itself.
        """
        length = self.magnitude()
        if length > 0.0:
            return Vector2D(self.x / length, self.y / length)
        return Vector2D(0.0, 0.0)

    def with_magnitude(self, target: float) -> "Vector2D":
        """
        Returns a vector with the same direction and the given magnitude.

        The zero vector is treated as pointing along (1, 0), so
        Vector2D(0, 0).with_magnitude(s) == Vector2D(s, 0). A negative target
        flips the direction.
        """
        length = self.magnitude()
        if length > 0.0:
            factor = target / length
            return Vector2D(self.x * factor, self.y * factor)
        return Vector2D(target, 0.0)

    def distance_to(self, other: "Vector2D") -> float:
        return self.subtract(other).magnitude()

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    # Operators
    def __add__(self, other):
        if not isinstance(other, Vector2D):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector2D):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, scalar):
        if isinstance(scalar, Vector2D):
            return NotImplemented
        return self.scale(scalar)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __neg__(self):
        return self.reversed()

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
