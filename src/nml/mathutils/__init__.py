"""Vector, matrix and quaternion types."""
from .common import PI, HALF_PI, TWO_PI, E, clamp, lerp, sin_cos, degrees_to_radians, radians_to_degrees
from .vector import VectorBase, Vector2, Vector3, Vector4
from .matrix4x4 import Matrix4x4
from .quaternion import Quaternion

__all__ = [
    'PI', 'HALF_PI', 'TWO_PI', 'E',
    'clamp', 'lerp', 'sin_cos', 'degrees_to_radians', 'radians_to_degrees',
    'VectorBase', 'Vector2', 'Vector3', 'Vector4',
    'Matrix4x4', 'Quaternion',
]
