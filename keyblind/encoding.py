"""Hex rendering of scalars, points and signatures for display and logs."""

from __future__ import annotations

from .curve import CurveContext, Point
from .errors import InvalidPointError


def scalar_hex(value: int, size: int = 32) -> str:
    return int(value).to_bytes(size, "big").hex()


def point_hex(curve: CurveContext, point: Point) -> str:
    return curve.encode_point(point).hex()


def parse_point(curve: CurveContext, value: str) -> Point:
    value = value.strip()
    if value.startswith("0x"):
        value = value[2:]
    try:
        data = bytes.fromhex(value)
    except ValueError:
        raise InvalidPointError("point must be a hex string") from None
    return curve.decode_point(data)


def signature_hex(signature: bytes) -> str:
    return bytes(signature).hex()
