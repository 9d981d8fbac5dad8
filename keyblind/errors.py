"""Error kinds raised by the blinding scheme.

Every failure is final: the computations are deterministic, so a failure means
bad input or a misused curve library, never a transient condition.
"""


class BlindingError(Exception):
    """Base class for all keyblind errors."""


class GenerationError(BlindingError):
    """Key generation failed (randomness source or curve library)."""


class InvalidScalarError(BlindingError, ValueError):
    """A scalar is outside the canonical nonzero range ``[1, n - 1]``."""


class InvalidPointError(BlindingError, ValueError):
    """A point is off the curve, the identity, or cannot be decoded."""


class VerificationError(BlindingError):
    """The signature service was given a malformed signature or key."""
