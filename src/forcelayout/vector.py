# SPDX-FileCopyrightText: Copyright DB InfraGO AG
# SPDX-License-Identifier: Apache-2.0
"""Vector types used by the layout engine.

The engine itself only relies on the :class:`AbstractVector` protocol,
so any immutable vector type implementing it can be plugged in. The
module level functions spell out that contract in functional form.
"""

from __future__ import annotations

__all__ = [
    "AbstractVector",
    "Vec2ish",
    "Vector2D",
    "add",
    "magnitude",
    "multiply",
    "normal",
    "random",
    "subtract",
    "zero",
]

import math
import random as _random
import typing as t

import typing_extensions as te

from forcelayout import exceptions

Vec2ish = t.Tuple[float, float]

_V = t.TypeVar("_V", bound="AbstractVector")


class AbstractVector(t.Protocol):
    """Arithmetic contract the force model is written against.

    Implementations must be immutable: every operation returns a new
    instance.
    """

    def __add__(self, other: te.Self) -> te.Self: ...

    def __sub__(self, other: te.Self) -> te.Self: ...

    def __mul__(self, other: float) -> te.Self: ...

    def __truediv__(self, other: float) -> te.Self: ...

    @property
    def length(self) -> float: ...

    @property
    def normalized(self) -> te.Self: ...

    @classmethod
    def zero(cls) -> te.Self: ...

    @classmethod
    def random(
        cls,
        lower: float,
        upper: float,
        rng: _random.Random | None = None,
    ) -> te.Self: ...

    @classmethod
    def random_direction(
        cls, rng: _random.Random | None = None
    ) -> te.Self: ...


class Vector2D(t.NamedTuple):
    """A vector in 2-dimensional space.

    Besides other vectors, the arithmetic operators also accept plain
    ``(x, y)`` pairs as the second operand.
    """

    x: float
    y: float

    @classmethod
    def zero(cls) -> Vector2D:
        """Return the additive identity."""
        return cls(0.0, 0.0)

    @classmethod
    def random(
        cls,
        lower: float,
        upper: float,
        rng: _random.Random | None = None,
    ) -> Vector2D:
        """Create a vector with each component uniformly in the bounds."""
        uniform = (rng or _random).uniform
        return cls(uniform(lower, upper), uniform(lower, upper))

    @classmethod
    def random_direction(cls, rng: _random.Random | None = None) -> Vector2D:
        """Create a random unit vector."""
        theta = (rng or _random).uniform(0, 2 * math.pi)
        return cls(math.cos(theta), math.sin(theta))

    def __add__(self, other: Vec2ish) -> Vector2D:  # type: ignore[override]
        if (pair := _pair(other)) is None:
            return NotImplemented
        return type(self)(self.x + pair[0], self.y + pair[1])

    def __radd__(self, other: Vec2ish) -> Vector2D:
        return self.__add__(other)

    def __sub__(self, other: Vec2ish) -> Vector2D:
        if (pair := _pair(other)) is None:
            return NotImplemented
        return type(self)(self.x - pair[0], self.y - pair[1])

    def __rsub__(self, other: Vec2ish) -> Vector2D:
        if (pair := _pair(other)) is None:
            return NotImplemented
        return type(self)(pair[0] - self.x, pair[1] - self.y)

    def __neg__(self) -> Vector2D:
        return type(self)(-self.x, -self.y)

    def __mul__(self, other: float) -> Vector2D:  # type: ignore[override]
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(self.x * other, self.y * other)

    __rmul__ = __mul__

    def __truediv__(self, other: float) -> Vector2D:
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(self.x / other, self.y / other)

    @property
    def length(self) -> float:
        """The euclidean length of this vector."""
        return math.hypot(self.x, self.y)

    @property
    def normalized(self) -> Vector2D:
        """The unit vector with the same direction as this one.

        Raises
        ------
        DegenerateVectorError
            If this vector has zero length.
        """
        length = self.length
        if length == 0:
            raise exceptions.DegenerateVectorError(
                "Cannot normalize a zero-length vector"
            )
        return self / length


def _pair(other: object) -> tuple[float, float] | None:
    if not isinstance(other, (tuple, list)) or len(other) != 2:
        return None
    return other[0], other[1]


def add(a: _V, b: _V) -> _V:
    return a + b


def subtract(a: _V, b: _V) -> _V:
    return a - b


def multiply(v: _V, scalar: float) -> _V:
    return v * scalar


def magnitude(v: AbstractVector) -> float:
    return v.length


def normal(v: _V) -> _V:
    """Return the unit vector pointing in the same direction as ``v``.

    Raises
    ------
    DegenerateVectorError
        If ``v`` has zero length.
    """
    return v.normalized


def zero(kind: type[_V] = Vector2D) -> _V:  # type: ignore[assignment]
    return kind.zero()


def random(
    kind: type[_V] = Vector2D,  # type: ignore[assignment]
    lower: float = -5.0,
    upper: float = 5.0,
    rng: _random.Random | None = None,
) -> _V:
    """Sample a vector of type ``kind`` uniformly within the bounds."""
    return kind.random(lower, upper, rng)
