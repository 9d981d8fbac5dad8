"""
End-to-end run of the blinding protocol between the three roles.

    Generate -> Derive offset -> Blind(private) | Blind(public) -> Sign -> Verify

The signer keeps its key pair to itself and hands only the public key to the
verifier; the shared value is known to everyone, including the observer.  The
two blinding steps are independent of each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .curve import CurveContext
from .encoding import point_hex, signature_hex
from .keys import PublicKey
from .offset import Offset, SharedValue, derive_offset
from .signatures import Message, SignatureService, signature_service_for
from .signer import KeyPair, generate_keypair
from .verifier import blind_public_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtocolResult:
    curve: CurveContext
    scheme: str
    offset: Offset
    original_public: PublicKey
    blinded_public: PublicKey
    signature: bytes
    on_curve: bool
    verified: bool
    verified_under_original: bool
    signer_keys: KeyPair = field(repr=False, compare=False)
    blinded_signer_keys: KeyPair = field(repr=False, compare=False)

    @property
    def keys_match(self) -> bool:
        """Whether the signer's and the verifier's blinded public keys agree."""
        return self.blinded_signer_keys.public == self.blinded_public


def observer_view(curve: CurveContext, shared_value: SharedValue) -> Offset:
    """Everything an observer can compute: the offset (and from it ``k*G``)."""
    return derive_offset(curve, shared_value)


def run_protocol(
    curve: CurveContext,
    shared_value: SharedValue,
    message: Message,
    keypair: Optional[KeyPair] = None,
    service: Optional[SignatureService] = None,
    verbose: bool = False,
) -> ProtocolResult:
    if service is None:
        service = signature_service_for(curve)

    # signer
    signer_keys = keypair if keypair is not None else generate_keypair(curve)
    handed_to_verifier = signer_keys.public

    # everyone, observer included
    offset = derive_offset(curve, shared_value)
    if verbose:
        print("offset k=", offset.hex())
        print("k*G=", point_hex(curve, offset.point()))

    blinded_signer_keys = signer_keys.blind(offset)
    blinded_public = blind_public_key(handed_to_verifier, offset)
    on_curve = curve.is_on_curve(blinded_public.point)
    if verbose:
        print("On curve:", on_curve)
        print("Original public:", handed_to_verifier.hex())
        print("New public:", blinded_public.hex())

    signature = service.sign(blinded_signer_keys.private, message)
    verified = service.verify(blinded_public, message, signature)
    verified_under_original = service.verify(handed_to_verifier, message, signature)
    if verbose:
        print("New signature:", signature_hex(signature))
        print("Verification:", verified)
        print("Verification under original key:", verified_under_original)

    logger.info(
        "%s/%s blinding run: verified=%s, original key accepted=%s",
        curve.name,
        service.name,
        verified,
        verified_under_original,
    )
    return ProtocolResult(
        curve=curve,
        scheme=service.name,
        offset=offset,
        original_public=handed_to_verifier,
        blinded_public=blinded_public,
        signature=signature,
        on_curve=on_curve,
        verified=verified,
        verified_under_original=verified_under_original,
        signer_keys=signer_keys,
        blinded_signer_keys=blinded_signer_keys,
    )
