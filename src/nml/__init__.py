"""NML - single precision vector, matrix and quaternion math for 3D graphics."""

__version__ = "0.1.0"

from nml.nml_config import NMLConfig, get_config, set_config, reset_config
from nml.mathutils import (
    PI, HALF_PI, TWO_PI, E,
    clamp, lerp, sin_cos, degrees_to_radians, radians_to_degrees,
    Vector2, Vector3, Vector4, Matrix4x4, Quaternion,
)

__all__ = [
    'NMLConfig', 'get_config', 'set_config', 'reset_config',
    'PI', 'HALF_PI', 'TWO_PI', 'E',
    'clamp', 'lerp', 'sin_cos', 'degrees_to_radians', 'radians_to_degrees',
    'Vector2', 'Vector3', 'Vector4', 'Matrix4x4', 'Quaternion',
]
