"""Public key material, the only key type the verifier side ever handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .curve import CurveContext, Point
from .errors import InvalidPointError


@dataclass(frozen=True)
class PublicKey:
    curve: CurveContext
    point: Tuple[int, int]

    def __post_init__(self) -> None:
        if self.point is None:
            raise InvalidPointError("public key cannot be the point at infinity")
        if not self.curve.is_on_curve(self.point):
            raise InvalidPointError(f"public key is not on {self.curve.name}")

    @classmethod
    def from_bytes(cls, curve: CurveContext, data: bytes) -> "PublicKey":
        point: Point = curve.decode_point(data)
        if point is None:
            raise InvalidPointError("public key cannot be the point at infinity")
        return cls(curve, point)

    def to_bytes(self) -> bytes:
        return self.curve.encode_point(self.point)

    def hex(self) -> str:
        return self.to_bytes().hex()
