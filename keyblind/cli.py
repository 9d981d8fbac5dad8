"""Command line entry point: ``keyblind demo | derive-offset | blind-public``."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from . import config
from .curve import get_curve
from .encoding import parse_point, point_hex, scalar_hex, signature_hex
from .errors import BlindingError, InvalidPointError
from .keys import PublicKey
from .offset import derive_offset, derive_offsets
from .protocol import run_protocol
from .signatures import SCHEMES, signature_service_for
from .signer import keypair_from_scalar
from .verifier import blind_public_key


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyblind",
        description="Additive key blinding over elliptic-curve key pairs",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Run signer, verifier and observer end to end")
    demo.add_argument("--curve", help=f"Curve name (default: ${config.CURVE_ENV_VAR} or {config.DEFAULT_CURVE})")
    demo.add_argument("--shared-value", help=f"Public value the offset is derived from (default: {config.DEFAULT_SHARED_VALUE!r})")
    demo.add_argument("--message", help=f"Message to sign (default: {config.DEFAULT_MESSAGE!r})")
    demo.add_argument("--private-key", help="Signer private key as hex (default: random)")
    demo.add_argument("--scheme", choices=sorted(SCHEMES), help="Signature scheme (default: ecdsa on secp256k1, schnorr elsewhere)")
    demo.add_argument("--scenario", help="JSON scenario file; command line flags override its values")
    demo.add_argument("--show-private", action="store_true", help="Also print the signer's original and blinded private keys")

    offset = subparsers.add_parser("derive-offset", help="Show the offset k and k*G for one or more shared values")
    offset.add_argument("shared_values", nargs="+", metavar="shared_value", help="Public value the offset is derived from")
    offset.add_argument("--curve", help="Curve name")

    blind = subparsers.add_parser("blind-public", help="Blind a public key with the offset of a shared value")
    blind.add_argument("public_key", help="Public key as hex (compressed or uncompressed)")
    blind.add_argument("shared_value", help="Public value the offset is derived from")
    blind.add_argument("--curve", help="Curve name")

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _scenario_for(args: argparse.Namespace) -> config.Scenario:
    data = {}
    if args.scenario:
        data.update(config.load_scenario_file(args.scenario))
    data.setdefault("shared_value", config.DEFAULT_SHARED_VALUE)
    overrides = {
        "curve": args.curve,
        "shared_value": args.shared_value,
        "message": args.message,
        "private_key": args.private_key,
        "signature_scheme": args.scheme,
    }
    data.update({key: value for key, value in overrides.items() if value is not None})
    return config.scenario_from_mapping(data)


def handle_demo(args: argparse.Namespace, out) -> int:
    scenario = _scenario_for(args)
    curve = scenario.curve
    keypair = None
    if scenario.private_key is not None:
        keypair = keypair_from_scalar(curve, scenario.private_key)
    service = signature_service_for(curve, scenario.scheme)

    result = run_protocol(
        curve,
        scenario.shared_value,
        scenario.message,
        keypair=keypair,
        service=service,
    )

    out.write(f"On curve: {str(result.on_curve).lower()}\n")
    if args.show_private:
        out.write(f"Original:\t{result.signer_keys.private.hex()} {result.original_public.hex()}\n")
        out.write(f"New:\t\t{result.blinded_signer_keys.private.hex()} {result.blinded_public.hex()}\n")
    else:
        out.write(f"Original:\t{result.original_public.hex()}\n")
        out.write(f"New:\t\t{result.blinded_public.hex()}\n")
    out.write(f"New signature: {signature_hex(result.signature)}\n")
    out.write(f"Verification: {str(result.verified).lower()}\n")
    return 0 if result.verified and not result.verified_under_original else 1


def handle_derive_offset(args: argparse.Namespace, out) -> int:
    curve = get_curve(args.curve or config.default_curve_name())
    offsets = derive_offsets(curve, args.shared_values)
    for value, k in zip(args.shared_values, offsets):
        k = int(k)
        if len(args.shared_values) > 1:
            out.write(f"{value}\n")
        out.write(f"k:\t{scalar_hex(k, curve.scalar_size)}\n")
        out.write(f"k*G:\t{point_hex(curve, curve.scalar_base_multiply(k))}\n")
    return 0


def handle_blind_public(args: argparse.Namespace, out) -> int:
    curve = get_curve(args.curve or config.default_curve_name())
    point = parse_point(curve, args.public_key)
    if point is None:
        raise InvalidPointError("public key cannot be the point at infinity")
    offset = derive_offset(curve, args.shared_value)
    blinded = blind_public_key(PublicKey(curve, point), offset)
    out.write(f"{blinded.hex()}\n")
    return 0


def main(argv: Optional[Sequence[str]] = None, out=None) -> int:
    out = sys.stdout if out is None else out
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        if args.command == "demo":
            return handle_demo(args, out)
        if args.command == "derive-offset":
            return handle_derive_offset(args, out)
        if args.command == "blind-public":
            return handle_blind_public(args, out)
    except (BlindingError, ValueError, OSError) as exc:  # user-facing errors
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    parser.error(f"Unknown command {args.command}")


if __name__ == "__main__":
    sys.exit(main())
