"""
Numeric configuration for NML.

This module centralizes the tolerances shared by the vector, matrix and
quaternion types, and whether degenerate results are reported:

Usage:
    from nml.nml_config import get_config, set_config

    # Report zero-length normalisation and singular inversion
    set_config(warn_on_degenerate=True)

    # Loosen the unit-length check
    set_config(normalised_tolerance=1e-4)
"""

import math
import warnings
from dataclasses import dataclass, fields, replace


@dataclass
class NMLConfig:
    """
    Tolerances and diagnostics used by the NML math types.

    Attributes:
        normalised_tolerance: Maximum distance of the squared length from 1.0
            for a vector or quaternion to count as normalised.

        normalise_threshold: Squared length at or below which normalise()
            gives up and returns the fixed fallback (unit X for vectors,
            (1, 0, 0, 0) for quaternions).

        slerp_threshold: Value of sin(theta) below which slerp stops dividing
            by the vanishing sine: nlerp when the inputs nearly coincide, the
            nearer endpoint when they are opposite.

        axis_angle_threshold: Value of sin(angle / 2) below which
            get_axis_angle() returns the default axis.

        warn_on_degenerate: Emit a RuntimeWarning when a zero-length value is
            normalised or a singular matrix is inverted. The returned value is
            the same either way.
    """
    normalised_tolerance: float = 1e-6
    normalise_threshold: float = 1e-6
    slerp_threshold: float = 1e-6
    axis_angle_threshold: float = 1e-6
    warn_on_degenerate: bool = False


_THRESHOLDS = ('normalised_tolerance', 'normalise_threshold', 'slerp_threshold', 'axis_angle_threshold')

_config = NMLConfig()


def _validate(config: NMLConfig) -> None:
    for name in _THRESHOLDS:
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{name} must be finite and non-negative, got {value}")
    if not isinstance(config.warn_on_degenerate, bool):
        raise ValueError(f"warn_on_degenerate must be True or False, got {config.warn_on_degenerate!r}")


def set_config(config: NMLConfig = None, **overrides) -> NMLConfig:
    """
    Replace the active configuration.

    Args:
        config: A complete NMLConfig to install. When omitted the current
            configuration is used as the base.
        **overrides: Individual NMLConfig fields to change.

    Returns:
        The configuration now in effect.

    Raises:
        ValueError: On an unknown field or an invalid threshold.
    """
    global _config
    base = config if config is not None else _config

    known = {f.name for f in fields(NMLConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown config option(s): {', '.join(unknown)}. Use {', '.join(sorted(known))}.")

    new_config = replace(base, **overrides)
    _validate(new_config)
    _config = new_config
    return _config


def get_config() -> NMLConfig:
    """Get the active configuration."""
    return _config


def reset_config() -> NMLConfig:
    """Restore the default configuration."""
    global _config
    _config = NMLConfig()
    return _config


def warn_degenerate(message: str) -> None:
    """Report a degenerate numeric result if the config asks for it."""
    if _config.warn_on_degenerate:
        warnings.warn(message, RuntimeWarning, stacklevel=3)
