"""
Quaternion - rotation representation and composition.

(x, y, z) is the vector part and w the scalar part. Only unit quaternions
represent rotations; add/subtract/scale are plain 4-component algebra and do
not keep unit length, while the Hamilton product of two unit quaternions does
(up to rounding).

Composition follows the matrix convention: (a * b).transform(v) rotates by b
first and then by a, and (a * b).to_matrix() equals a.to_matrix() * b.to_matrix().
"""
import math
import numbers

import numpy as np

from nml.nml_config import get_config, warn_degenerate
from .common import clamp
from .matrix4x4 import Matrix4x4
from .vector import Vector3, Vector4, VectorBase, _component

_FLOAT = np.float32

# Fallback for normalising a zero-length quaternion. Note this is not identity().
_NORMALISE_FALLBACK = (1.0, 0.0, 0.0, 0.0)


class Quaternion(VectorBase):
    """
    Construction accepts:
        - no arguments: all components zero (use identity() for no rotation)
        - x, y, z, w
        - one sequence of 4 values
        - a Vector3 vector part and the scalar w
    """
    __slots__ = ()
    SIZE = 4

    x = _component(0, 'x')
    y = _component(1, 'y')
    z = _component(2, 'z')
    w = _component(3, 'w')

    def __init__(self, *args):
        if len(args) == 2 and isinstance(args[0], Vector3):
            vector, w = args
            super().__init__(vector.x, vector.y, vector.z, w)
        elif len(args) in (0, 4) or (len(args) == 1 and not isinstance(args[0], numbers.Real)):
            super().__init__(*args)
        else:
            raise ValueError(f"Quaternion takes x, y, z, w, one sequence of 4 values or (Vector3, w), got {args!r}")

    @classmethod
    def identity(cls):
        return cls(0.0, 0.0, 0.0, 1.0)

    # ------------------------------------------------------------------
    # Unit length
    # ------------------------------------------------------------------

    def normalised(self):
        """
        Return a unit-length copy.

        A quaternion whose squared length does not exceed the configured
        threshold is replaced by the fixed fallback (1, 0, 0, 0).
        """
        length_squared = self.length_squared()
        if length_squared > get_config().normalise_threshold:
            return self._wrap(self._data.astype(np.float64) / math.sqrt(length_squared))
        warn_degenerate("Normalising a zero-length Quaternion; returning (1, 0, 0, 0)")
        return Quaternion(_NORMALISE_FALLBACK)

    def conjugated(self):
        """Negate the vector part."""
        x, y, z, w = self._data
        return self._wrap(np.array((-x, -y, -z, w), dtype=_FLOAT))

    def conjugate(self):
        """Conjugate in place."""
        self._data = self.conjugated()._data

    def inverted(self):
        """
        General inverse: conjugate / length_squared.

        Equals the conjugate for unit quaternions. A zero quaternion yields
        inf/nan components.
        """
        length_squared = _FLOAT(self.length_squared())
        if length_squared == 0:
            warn_degenerate("Inverting a zero-length Quaternion; result contains inf/nan")
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._wrap(self.conjugated()._data / length_squared)

    def invert(self):
        """Invert in place."""
        self._data = self.inverted()._data

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def multiply(self, other):
        """Hamilton product self * other (non-commutative)."""
        ax, ay, az, aw = self._data
        bx, by, bz, bw = other._data
        return Quaternion._wrap(np.array((
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by + ay * bw + az * bx - ax * bz,
            aw * bz + az * bw + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        ), dtype=_FLOAT))

    def transform(self, vec):
        """
        Rotate a Vector3 by conjugation q * v * q^-1.

        Uses the closed form v + 2w(u x v) + 2u x (u x v) with u the vector
        part, so the quaternion is assumed to be unit length.
        """
        x, y, z, w = self._data
        vx, vy, vz = vec._data

        # t = 2 (u x v)
        tx = 2 * (y * vz - z * vy)
        ty = 2 * (z * vx - x * vz)
        tz = 2 * (x * vy - y * vx)

        # v + w t + u x t
        return Vector3._wrap(np.array((
            vx + w * tx + (y * tz - z * ty),
            vy + w * ty + (z * tx - x * tz),
            vz + w * tz + (x * ty - y * tx),
        ), dtype=_FLOAT))

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, Vector3):
            return self.transform(other)
        if isinstance(other, numbers.Real):
            return self._wrap(self._data * other)
        return NotImplemented

    # ------------------------------------------------------------------
    # Rotation factories
    # ------------------------------------------------------------------

    @classmethod
    def rotate_axis(cls, axis, angle):
        """
        Rotation of angle radians about axis: (axis * sin(angle/2), cos(angle/2)).

        The axis must already be unit length; it is not normalised here.
        """
        x, y, z = axis
        half = angle * 0.5
        sin = math.sin(half)
        return cls(x * sin, y * sin, z * sin, math.cos(half))

    @classmethod
    def rotate_euler(cls, yaw, pitch, roll):
        """
        Rotation from Euler angles in radians.

        yaw turns about Y, pitch about X and roll about Z. The result is
        rotate_axis(Y, yaw) * rotate_axis(X, pitch) * rotate_axis(Z, roll),
        so roll is applied first and yaw last.
        """
        sy, cy = math.sin(yaw * 0.5), math.cos(yaw * 0.5)
        sp, cp = math.sin(pitch * 0.5), math.cos(pitch * 0.5)
        sr, cr = math.sin(roll * 0.5), math.cos(roll * 0.5)

        # Combined yxz product
        return cls(
            cy * sp * cr + sy * cp * sr,
            sy * cp * cr - cy * sp * sr,
            cy * cp * sr - sy * sp * cr,
            cy * cp * cr + sy * sp * sr,
        )

    def get_axis_angle(self):
        """
        Recover the rotation as Vector4(axis_x, axis_y, axis_z, angle).

        angle = 2 * acos(w) and axis = (x, y, z) / sin(angle / 2). For a
        rotation close to zero the axis is undefined and unit X is returned.
        """
        x, y, z, w = self.to_tuple()
        angle = 2.0 * math.acos(clamp(w, -1.0, 1.0))
        sin = math.sin(angle * 0.5)
        if abs(sin) < get_config().axis_angle_threshold:
            return Vector4(1.0, 0.0, 0.0, angle)
        return Vector4(x / sin, y / sin, z / sin, angle)

    # ------------------------------------------------------------------
    # Matrix conversion
    # ------------------------------------------------------------------

    def to_matrix(self):
        """Equivalent rotation Matrix4x4 (assumes a unit quaternion)."""
        x, y, z, w = self._data
        xx, yy, zz = x * x, y * y, z * z
        xy, xz, yz = x * y, x * z, y * z
        wx, wy, wz = w * x, w * y, w * z
        return Matrix4x4((
            (1 - 2 * (yy + zz), 2 * (xy - wz), 2 * (xz + wy), 0.0),
            (2 * (xy + wz), 1 - 2 * (xx + zz), 2 * (yz - wx), 0.0),
            (2 * (xz - wy), 2 * (yz + wx), 1 - 2 * (xx + yy), 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    get_matrix4x4 = to_matrix

    @classmethod
    def from_matrix(cls, matrix):
        """
        Unit quaternion for the rotation held in the upper-left 3x3 of matrix.

        The branch on the largest diagonal term keeps the square root away
        from zero.
        """
        (m11, m12, m13, _), (m21, m22, m23, _), (m31, m32, m33, _), _ = matrix.to_rows()
        trace = m11 + m22 + m33
        if trace > 0:
            s = math.sqrt(trace + 1.0) * 2.0  # 4w
            q = cls((m32 - m23) / s, (m13 - m31) / s, (m21 - m12) / s, 0.25 * s)
        elif m11 > m22 and m11 > m33:
            s = math.sqrt(1.0 + m11 - m22 - m33) * 2.0  # 4x
            q = cls(0.25 * s, (m12 + m21) / s, (m13 + m31) / s, (m32 - m23) / s)
        elif m22 > m33:
            s = math.sqrt(1.0 + m22 - m11 - m33) * 2.0  # 4y
            q = cls((m12 + m21) / s, 0.25 * s, (m23 + m32) / s, (m13 - m31) / s)
        else:
            s = math.sqrt(1.0 + m33 - m11 - m22) * 2.0  # 4z
            q = cls((m13 + m31) / s, (m23 + m32) / s, 0.25 * s, (m21 - m12) / s)
        return q.normalised()

    # ------------------------------------------------------------------
    # Interpolation
    # ------------------------------------------------------------------

    def nlerp(self, other, t):
        """Lerp followed by normalisation. Unit length, but not constant angular speed."""
        return self.lerp(other, t).normalised()

    def slerp(self, other, t):
        """
        Spherical linear interpolation along the great arc from self to other.

        Uses sin((1-t)θ)/sinθ * a + sin(tθ)/sinθ * b with θ = acos(a·b). The
        arc is taken as given; other is not negated to pick the shorter one.

        When sinθ falls below the configured threshold the arc is undefined:
        for θ near 0 the result comes from nlerp, for θ near π (other is -self,
        the same rotation) a copy of self is returned for t < 0.5 and a copy of
        other otherwise.
        """
        a = self._data.astype(np.float64)
        b = other._data.astype(np.float64)
        # Dividing by the lengths maps exact copies and exact negations to +-1
        # despite float32 storage
        scale = math.sqrt(np.dot(a, a) * np.dot(b, b))
        dot = clamp(float(np.dot(a, b)) / scale, -1.0, 1.0) if scale > 0 else 1.0
        theta = math.acos(dot)
        sin_theta = math.sin(theta)
        if sin_theta < get_config().slerp_threshold:
            if dot > 0:
                return self.nlerp(other, t)
            return self.copy() if t < 0.5 else other.copy()

        weight_a = math.sin((1.0 - t) * theta) / sin_theta
        weight_b = math.sin(t * theta) / sin_theta
        return self._wrap(a * weight_a + b * weight_b)
