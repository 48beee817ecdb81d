"""
Scalar helpers and constants shared by the vector, matrix and quaternion types.

Values are single precision (numpy.float32) to match the storage of the
math types.
"""
import math

import numpy as np

PI = np.float32(math.pi)
HALF_PI = np.float32(math.pi / 2.0)
TWO_PI = np.float32(math.pi * 2.0)
E = np.float32(math.e)

# Angles above this lose too much precision in single precision sin/cos
SIN_COS_LIMIT = 8192.0


def clamp(value, minimum, maximum):
    """Clamp value into [minimum, maximum]."""
    if value > maximum:
        value = maximum
    if value < minimum:
        value = minimum
    return value


def lerp(a, b, t):
    """Linear interpolation."""
    return a + (b - a) * t


def sin_cos(x):
    """Return (sin(x), cos(x)) as single precision values.

    Raises:
        OverflowError: If abs(x) is larger than SIN_COS_LIMIT.
    """
    if abs(x) > SIN_COS_LIMIT:
        raise OverflowError(f"sin_cos does not support angles over {SIN_COS_LIMIT:g}, got {x}")
    return np.float32(math.sin(x)), np.float32(math.cos(x))


def degrees_to_radians(value):
    return value * (PI / np.float32(180.0))


def radians_to_degrees(value):
    return value * (np.float32(180.0) / PI)
