"""
Offset derivation.

An offset is the public scalar ``k`` that the signer and the verifier both add
to their half of the key pair.  It is derived from a value every role already
knows (an election identifier, a round number, ...) by reading the bytes as a
big-endian unsigned integer and reducing it modulo the group order.  The
reduction is always explicit: a value of ``n`` or more is a different integer
from its residue and is never used as is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

import galois

from .curve import CurveContext, Point
from .encoding import scalar_hex
from .errors import InvalidScalarError

logger = logging.getLogger(__name__)

SharedValue = Union[bytes, bytearray, memoryview, str]


@dataclass(frozen=True)
class Offset:
    curve: CurveContext
    value: int
    raw: Optional[int] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", self.curve.require_scalar(self.value, "offset"))

    def scalar(self):
        return self.curve.scalar(self.value)

    def negate(self) -> "Offset":
        """The offset ``n - k`` that undoes this one."""
        return Offset(self.curve, int(-self.scalar()))

    def point(self) -> Point:
        """``k*G``: public, anyone holding the shared value can compute it."""
        return self.curve.scalar_base_multiply(self.value)

    def hex(self) -> str:
        return scalar_hex(self.value, self.curve.scalar_size)


def shared_value_bytes(value: SharedValue) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"shared value must be bytes or str, not {type(value).__name__}")


def derive_offset(curve: CurveContext, value: SharedValue) -> Offset:
    data = shared_value_bytes(value)
    raw = int.from_bytes(data, "big")
    reduced = raw % curve.order
    if reduced == 0:
        raise InvalidScalarError(
            f"shared value {data!r} reduces to zero modulo the {curve.name} group order"
        )
    if reduced != raw:
        logger.debug("offset for %r reduced modulo the %s order", data, curve.name)
    return Offset(curve, reduced, raw=raw)


def derive_offsets(curve: CurveContext, values: Iterable[SharedValue]) -> galois.FieldArray:
    """Derive one offset per shared value, as a vector over GF(n)."""
    field_ = curve.scalar_field
    return field_([derive_offset(curve, value).value for value in values])
