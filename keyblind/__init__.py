"""Additive key blinding over elliptic-curve key pairs."""

from .curve import BN128, CURVES, SECP256K1, CurveContext, get_curve
from .errors import (
    BlindingError,
    GenerationError,
    InvalidPointError,
    InvalidScalarError,
    VerificationError,
)
from .keys import PublicKey
from .offset import Offset, derive_offset, derive_offsets
from .protocol import ProtocolResult, observer_view, run_protocol
from .signatures import (
    EcdsaSignatureService,
    SchnorrSignatureService,
    SignatureService,
    signature_service_for,
)
from .signer import (
    KeyPair,
    PrivateKey,
    blind_private_key,
    generate_keypair,
    keypair_from_hex,
    keypair_from_scalar,
)
from .verifier import blind_public_key

__all__ = [
    "BN128",
    "CURVES",
    "SECP256K1",
    "CurveContext",
    "get_curve",
    "BlindingError",
    "GenerationError",
    "InvalidPointError",
    "InvalidScalarError",
    "VerificationError",
    "PublicKey",
    "Offset",
    "derive_offset",
    "derive_offsets",
    "ProtocolResult",
    "observer_view",
    "run_protocol",
    "EcdsaSignatureService",
    "SchnorrSignatureService",
    "SignatureService",
    "signature_service_for",
    "KeyPair",
    "PrivateKey",
    "blind_private_key",
    "generate_keypair",
    "keypair_from_hex",
    "keypair_from_scalar",
    "blind_public_key",
]
