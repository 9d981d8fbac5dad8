"""
Verifier side of the blinding scheme.

The verifier only ever holds the signer's public key ``Q``.  Given the shared
offset ``k`` it computes the blinded public key with curve arithmetic alone:

    Q' = Q + k*G

An observer knows ``k`` (and so ``k*G``) but not ``Q``, and therefore cannot
compute ``Q'``.  Nothing in this module accepts or produces a private scalar.
"""

from __future__ import annotations

import logging

from .errors import InvalidPointError, InvalidScalarError
from .keys import PublicKey
from .offset import Offset

logger = logging.getLogger(__name__)


def blind_public_key(public_key: PublicKey, offset: Offset) -> PublicKey:
    if not isinstance(public_key, PublicKey):
        raise TypeError(
            f"public blinding takes a PublicKey, not {type(public_key).__name__}"
        )
    if not isinstance(offset, Offset):
        raise TypeError(f"offset must be an Offset, not {type(offset).__name__}")

    curve = public_key.curve
    if offset.curve != curve:
        raise InvalidScalarError(
            f"offset was derived for {offset.curve.name}, public key is on {curve.name}"
        )
    if curve.is_infinity(public_key.point) or not curve.is_on_curve(public_key.point):
        raise InvalidPointError(f"public key is not a valid {curve.name} point")

    offset_point = curve.scalar_base_multiply(offset.value)
    blinded = curve.point_add(public_key.point, offset_point)

    if curve.is_infinity(blinded):
        raise InvalidPointError("blinded public key is the point at infinity")
    if not curve.is_on_curve(blinded):
        raise InvalidPointError(f"blinded public key is not on {curve.name}")

    result = PublicKey(curve, blinded)
    logger.debug("blinded public key %s -> %s", public_key.hex(), result.hex())
    return result
