"""Scenario files and environment defaults for the command line."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from .curve import CurveContext, get_curve
from .signatures import SCHEMES

DEFAULT_CURVE = "secp256k1"
DEFAULT_SHARED_VALUE = "Election 2019031"
DEFAULT_MESSAGE = "Hello world"
CURVE_ENV_VAR = "KEYBLIND_CURVE"


@dataclass(frozen=True)
class Scenario:
    curve: CurveContext
    shared_value: str
    message: str
    private_key: Optional[int] = None
    scheme: Optional[str] = None


def default_curve_name() -> str:
    return os.environ.get(CURVE_ENV_VAR) or DEFAULT_CURVE


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("private_key must be an integer or a hex string.")
    if isinstance(value, str):
        # strings are hex, with or without the 0x prefix
        return int(value.strip(), 16)
    return int(value)


def _require_key(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Scenario missing required key '{key}'.")
    return data[key]


def load_scenario_file(path) -> Mapping[str, Any]:
    path = Path(path)
    with path.open("r", encoding="utf-8") as infile:
        data = json.load(infile)
    if not isinstance(data, dict):
        raise ValueError("Scenario file must contain a JSON object.")
    return data


def scenario_from_mapping(data: Mapping[str, Any]) -> Scenario:
    curve = get_curve(str(data.get("curve") or default_curve_name()))
    shared_value = str(_require_key(data, "shared_value"))
    message = str(data.get("message", DEFAULT_MESSAGE))

    private_key = None
    if data.get("private_key") is not None:
        try:
            private_key = _to_int(data["private_key"])
        except (TypeError, ValueError):
            raise ValueError("private_key must be an integer or a hex string.") from None

    scheme = data.get("signature_scheme")
    if scheme is not None:
        scheme = str(scheme).lower()
        if scheme not in SCHEMES:
            raise ValueError(
                f"Unknown signature_scheme '{scheme}'. Choose one of: {', '.join(sorted(SCHEMES))}."
            )

    return Scenario(
        curve=curve,
        shared_value=shared_value,
        message=message,
        private_key=private_key,
        scheme=scheme,
    )


def load_scenario(path) -> Scenario:
    return scenario_from_mapping(load_scenario_file(path))
