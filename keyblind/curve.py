"""
Curve contexts for additive key blinding.

A ``CurveContext`` bundles the group parameters of one named curve with the
py_ecc routines that operate on it, so every component receives the curve as an
explicit value instead of importing module-level constants.  Points are plain
``(x, y)`` tuples of ints, with ``None`` standing for the point at infinity; the
context converts to and from whatever representation py_ecc uses internally.

Both supported curves are short Weierstrass curves ``y^2 = x^3 + b`` whose
field modulus is 3 mod 4, which keeps point decompression a single
exponentiation.
"""

from __future__ import annotations

import functools
import os
import tempfile
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

cache_dir = os.path.join(tempfile.gettempdir(), "numba_cache")
os.makedirs(cache_dir, exist_ok=True)
os.environ.setdefault("NUMBA_CACHE_DIR", cache_dir)

import galois  # noqa: E402
from py_ecc import bn128  # noqa: E402
from py_ecc.secp256k1 import secp256k1  # noqa: E402

from .errors import InvalidPointError, InvalidScalarError  # noqa: E402

Point = Optional[Tuple[int, int]]


@functools.lru_cache(maxsize=None)
def _scalar_field(order: int, primitive_element: Optional[int] = None):
    if primitive_element is None:
        return galois.GF(order)
    # Factoring n - 1 to find a generator is too slow for some group orders.
    return galois.GF(order, primitive_element=primitive_element, verify=False)


@dataclass(frozen=True)
class CurveContext:
    name: str
    field_modulus: int
    order: int
    b: int
    generator: Tuple[int, int]
    to_native: Callable = field(repr=False, compare=False)
    from_native: Callable = field(repr=False, compare=False)
    native_multiply: Callable = field(repr=False, compare=False)
    native_add: Callable = field(repr=False, compare=False)
    field_generator: Optional[int] = field(default=None, repr=False, compare=False)

    @property
    def coordinate_size(self) -> int:
        return (self.field_modulus.bit_length() + 7) // 8

    @property
    def scalar_size(self) -> int:
        return (self.order.bit_length() + 7) // 8

    @property
    def scalar_field(self):
        """The prime field GF(n) that private scalars and offsets live in."""
        return _scalar_field(self.order, self.field_generator)

    def scalar(self, value: int):
        """Reduce ``value`` modulo the group order into the scalar field."""
        return self.scalar_field(int(value) % self.order)

    def is_valid_scalar(self, value: int) -> bool:
        return 0 < int(value) < self.order

    def require_scalar(self, value: int, what: str = "scalar") -> int:
        value = int(value)
        if not self.is_valid_scalar(value):
            raise InvalidScalarError(
                f"{what} must be in [1, n - 1] for {self.name}"
            )
        return value

    def multiply(self, point: Point, scalar: int) -> Point:
        scalar = int(scalar) % self.order
        if point is None or scalar == 0:
            return None
        return self.from_native(self.native_multiply(self.to_native(point), scalar))

    def scalar_base_multiply(self, scalar: int) -> Point:
        return self.multiply(self.generator, scalar)

    def point_add(self, point_a: Point, point_b: Point) -> Point:
        if point_a is None:
            return point_b
        if point_b is None:
            return point_a
        return self.from_native(
            self.native_add(self.to_native(point_a), self.to_native(point_b))
        )

    def negate(self, point: Point) -> Point:
        if point is None:
            return None
        x, y = point
        return x, (-y) % self.field_modulus

    def is_infinity(self, point: Point) -> bool:
        return point is None

    def is_on_curve(self, point: Point) -> bool:
        if point is None:
            return True
        try:
            x, y = point
        except (TypeError, ValueError):
            return False
        if not isinstance(x, int) or not isinstance(y, int):
            return False
        p = self.field_modulus
        if not (0 <= x < p and 0 <= y < p):
            return False
        return (y * y - x * x * x - self.b) % p == 0

    def encode_point(self, point: Point) -> bytes:
        """SEC1 compressed encoding; the identity encodes as a single zero byte."""
        if point is None:
            return b"\x00"
        x, y = point
        return bytes([2 + (y & 1)]) + x.to_bytes(self.coordinate_size, "big")

    def decode_point(self, data: bytes) -> Point:
        size = self.coordinate_size
        if data == b"\x00":
            return None
        if len(data) == 1 + size and data[0] in (2, 3):
            x = int.from_bytes(data[1:], "big")
            if x >= self.field_modulus:
                raise InvalidPointError("x coordinate out of range")
            y = self._recover_y(x, data[0] & 1)
            point = (x, y)
        elif len(data) == 1 + 2 * size and data[0] == 4:
            x = int.from_bytes(data[1 : 1 + size], "big")
            y = int.from_bytes(data[1 + size :], "big")
            point = (x, y)
        else:
            raise InvalidPointError(
                f"point encoding must be 1, {1 + size} or {1 + 2 * size} bytes"
            )
        if not self.is_on_curve(point):
            raise InvalidPointError(f"point is not on {self.name}")
        return point

    def _recover_y(self, x: int, parity: int) -> int:
        p = self.field_modulus
        rhs = (x * x * x + self.b) % p
        y = pow(rhs, (p + 1) // 4, p)
        if (y * y - rhs) % p != 0:
            raise InvalidPointError(f"x is not the abscissa of a point on {self.name}")
        if y & 1 != parity:
            y = p - y
        return y


def _secp256k1_to_native(point: Point):
    return (0, 0) if point is None else point


def _secp256k1_from_native(point) -> Point:
    x, y = point
    if y == 0:
        return None
    return int(x), int(y)


def _bn128_to_native(point: Point):
    if point is None:
        return None
    x, y = point
    return bn128.FQ(x), bn128.FQ(y)


def _bn128_from_native(point) -> Point:
    if point is None:
        return None
    x, y = point
    return int(x.n), int(y.n)


SECP256K1 = CurveContext(
    name="secp256k1",
    field_modulus=secp256k1.P,
    order=secp256k1.N,
    b=secp256k1.B,
    generator=(secp256k1.Gx, secp256k1.Gy),
    to_native=_secp256k1_to_native,
    from_native=_secp256k1_from_native,
    native_multiply=secp256k1.multiply,
    native_add=secp256k1.add,
    field_generator=7,
)

BN128 = CurveContext(
    name="bn128",
    field_modulus=bn128.FQ.field_modulus,
    order=bn128.curve_order,
    b=int(bn128.b.n),
    generator=_bn128_from_native(bn128.G1),
    to_native=_bn128_to_native,
    from_native=_bn128_from_native,
    native_multiply=bn128.multiply,
    native_add=bn128.add,
    field_generator=5,
)

CURVES: Dict[str, CurveContext] = {curve.name: curve for curve in (SECP256K1, BN128)}


def get_curve(name: str) -> CurveContext:
    try:
        return CURVES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown curve '{name}'. Choose one of: {', '.join(sorted(CURVES))}."
        ) from None
