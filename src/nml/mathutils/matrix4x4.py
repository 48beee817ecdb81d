"""
Matrix4x4 - 4x4 single precision matrix for affine transforms and projections.

The data is stored row-major: m12 is the first row, second column, and flat
index i addresses row i // 4, column i % 4. Matrices premultiply column
vectors (M * v), so in a product a * b the transform b is applied first.
"""
import math
import numbers

import numpy as np

from nml.nml_config import warn_degenerate
from .common import PI
from .vector import Vector3, Vector4

_FLOAT = np.float32
_ONE = _FLOAT(1.0)

_IDENTITY_4x4_TUPLE = (
    (1.0, 0.0, 0.0, 0.0),
    (0.0, 1.0, 0.0, 0.0),
    (0.0, 0.0, 1.0, 0.0),
    (0.0, 0.0, 0.0, 1.0)
)


def unpack_args(*args):
    """Accept either a 3-component sequence (e.g. Vector3) or three individual values."""
    if len(args) == 3:
        x, y, z = args
    elif len(args) == 1 and len(args[0]) == 3:
        x, y, z = args[0]
    else:
        raise ValueError("Invalid number of arguments. Expected either a Vector3/(x, y, z) or three individual values.")
    return x, y, z


def _element(row, column):
    def getter(self):
        return float(self._m[row, column])

    def setter(self, value):
        self._m[row, column] = value

    return property(getter, setter, doc=f"Element at row {row + 1}, column {column + 1}.")


def _check_index(value, name, limit):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise TypeError(f"Matrix4x4 {name} must be an integer, not {type(value).__name__}")
    if not 0 <= value < limit:
        raise IndexError(f"Matrix4x4 {name} {value} out of range")
    return int(value)


def _check_extent(low, high, low_name, high_name):
    if low == high:
        raise ValueError(f"{low_name} and {high_name} must differ, got {low_name}={low}, {high_name}={high}")


def _from_values(values):
    try:
        data = np.array(values, dtype=_FLOAT)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Matrix4x4 expects 16 numeric values, got {values!r}") from e
    if data.shape not in ((16,), (4, 4)):
        raise ValueError(f"The size of the values collection must contain 16 elements, got {data.size}")
    return data.reshape(4, 4)


class Matrix4x4:
    """
    A 4x4 matrix used for affine transformations (rotation, scaling,
    translation) and perspective projections in 3D space.

    Construction accepts:
        - no arguments: all elements zero
        - one number: every element set to that value
        - one sequence of 16 values (row-major) or a nested 4x4 sequence
        - 16 individual values (row-major)
    """
    __slots__ = ('_m',)

    # Make numpy defer to our operators instead of broadcasting over us
    __array_ufunc__ = None

    def __init__(self, *args):
        if not args:
            m = np.zeros((4, 4), dtype=_FLOAT)
        elif len(args) == 1:
            try:
                m = np.full((4, 4), float(args[0]), dtype=_FLOAT)
            except TypeError:
                m = _from_values(args[0])
        elif len(args) == 16:
            m = _from_values(args)
        else:
            raise ValueError(f"Matrix4x4 takes one value, one sequence of 16 values or 16 values, got {len(args)} arguments")
        self._m = m

    @classmethod
    def _wrap(cls, m):
        """Adopt a (4, 4) array the caller no longer references."""
        matrix = cls.__new__(cls)
        matrix._m = np.asarray(m, dtype=_FLOAT).reshape(4, 4)
        return matrix

    m11 = _element(0, 0)
    m12 = _element(0, 1)
    m13 = _element(0, 2)
    m14 = _element(0, 3)
    m21 = _element(1, 0)
    m22 = _element(1, 1)
    m23 = _element(1, 2)
    m24 = _element(1, 3)
    m31 = _element(2, 0)
    m32 = _element(2, 1)
    m33 = _element(2, 2)
    m34 = _element(2, 3)
    m41 = _element(3, 0)
    m42 = _element(3, 1)
    m43 = _element(3, 2)
    m44 = _element(3, 3)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    @staticmethod
    def _locate(key):
        if isinstance(key, tuple):
            if len(key) != 2:
                raise IndexError(f"Matrix4x4 takes [row, column] or [index], got {len(key)} indices")
            return _check_index(key[0], 'row', 4), _check_index(key[1], 'column', 4)
        return divmod(_check_index(key, 'index', 16), 4)

    def __getitem__(self, key):
        return float(self._m[self._locate(key)])

    def __setitem__(self, key, value):
        self._m[self._locate(key)] = value

    def set(self, *values):
        """Overwrite all 16 elements (row-major), given individually or as one sequence."""
        if len(values) == 1:
            values = values[0]
        self._m = _from_values(values)

    def row(self, index):
        return Vector4._wrap(self._m[_check_index(index, 'row', 4)].copy())

    def column(self, index):
        return Vector4._wrap(self._m[:, _check_index(index, 'column', 4)].copy())

    # ------------------------------------------------------------------
    # Matrix algebra
    # ------------------------------------------------------------------

    def determinant(self):
        """
        Determinant by Laplace expansion along the first row.

        The six 2x2 minors of the bottom two rows (c1..c6) are shared by the
        four 3x3 cofactors. A result of 0 means the matrix has no inverse.
        """
        (a11, a12, a13, a14,
         a21, a22, a23, a24,
         a31, a32, a33, a34,
         a41, a42, a43, a44) = self._m.ravel()

        c1 = (a33 * a44) - (a34 * a43)
        c2 = (a32 * a44) - (a34 * a42)
        c3 = (a32 * a43) - (a33 * a42)
        c4 = (a31 * a44) - (a34 * a41)
        c5 = (a31 * a43) - (a33 * a41)
        c6 = (a31 * a42) - (a32 * a41)

        return float(
            a11 * ((a22 * c1) - (a23 * c2) + (a24 * c3))
            - a12 * ((a21 * c1) - (a23 * c4) + (a24 * c5))
            + a13 * ((a21 * c2) - (a22 * c4) + (a24 * c6))
            - a14 * ((a21 * c3) - (a22 * c5) + (a23 * c6))
        )

    def inverted(self):
        """
        Analytic inverse: the adjugate (transposed cofactor matrix) divided by
        the determinant.

        No singularity check is made. For a matrix whose determinant is 0 the
        result holds inf/nan elements; test determinant() first when that
        matters.
        """
        (a11, a12, a13, a14,
         a21, a22, a23, a24,
         a31, a32, a33, a34,
         a41, a42, a43, a44) = self._m.ravel()

        # 2x2 minors of rows 3-4
        c1 = (a33 * a44) - (a34 * a43)
        c2 = (a32 * a44) - (a34 * a42)
        c3 = (a32 * a43) - (a33 * a42)
        c4 = (a31 * a44) - (a34 * a41)
        c5 = (a31 * a43) - (a33 * a41)
        c6 = (a31 * a42) - (a32 * a41)

        # Cofactors of the first row
        f1 = (a22 * c1) - (a23 * c2) + (a24 * c3)
        f2 = -((a21 * c1) - (a23 * c4) + (a24 * c5))
        f3 = (a21 * c2) - (a22 * c4) + (a24 * c6)
        f4 = -((a21 * c3) - (a22 * c5) + (a23 * c6))

        det = (a11 * f1) + (a12 * f2) + (a13 * f3) + (a14 * f4)
        if det == 0:
            warn_degenerate("Inverting a singular Matrix4x4; result contains inf/nan")

        # 2x2 minors of rows 2 and 4
        d1 = (a23 * a44) - (a24 * a43)
        d2 = (a22 * a44) - (a24 * a42)
        d3 = (a22 * a43) - (a23 * a42)
        d4 = (a21 * a44) - (a24 * a41)
        d5 = (a21 * a43) - (a23 * a41)
        d6 = (a21 * a42) - (a22 * a41)

        # 2x2 minors of rows 2-3
        e1 = (a23 * a34) - (a24 * a33)
        e2 = (a22 * a34) - (a24 * a32)
        e3 = (a22 * a33) - (a23 * a32)
        e4 = (a21 * a34) - (a24 * a31)
        e5 = (a21 * a33) - (a23 * a31)
        e6 = (a21 * a32) - (a22 * a31)

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            inv_det = _ONE / det
            return Matrix4x4._wrap(np.array((
                (f1 * inv_det,
                 -((a12 * c1) - (a13 * c2) + (a14 * c3)) * inv_det,
                 ((a12 * d1) - (a13 * d2) + (a14 * d3)) * inv_det,
                 -((a12 * e1) - (a13 * e2) + (a14 * e3)) * inv_det),
                (f2 * inv_det,
                 ((a11 * c1) - (a13 * c4) + (a14 * c5)) * inv_det,
                 -((a11 * d1) - (a13 * d4) + (a14 * d5)) * inv_det,
                 ((a11 * e1) - (a13 * e4) + (a14 * e5)) * inv_det),
                (f3 * inv_det,
                 -((a11 * c2) - (a12 * c4) + (a14 * c6)) * inv_det,
                 ((a11 * d2) - (a12 * d4) + (a14 * d6)) * inv_det,
                 -((a11 * e2) - (a12 * e4) + (a14 * e6)) * inv_det),
                (f4 * inv_det,
                 ((a11 * c3) - (a12 * c5) + (a13 * c6)) * inv_det,
                 -((a11 * d3) - (a12 * d5) + (a13 * d6)) * inv_det,
                 ((a11 * e3) - (a12 * e5) + (a13 * e6)) * inv_det),
            ), dtype=_FLOAT))

    def invert(self):
        """Invert in place. See inverted()."""
        self._m = self.inverted()._m

    def transposed(self):
        """Swap rows and columns. All 16 source elements are read into a fresh array."""
        return Matrix4x4._wrap(self._m.T.copy())

    def transpose(self):
        """Transpose in place."""
        self._m = self.transposed()._m

    def transform(self, vec):
        """Apply the matrix to a column vector: result[i] = dot(row_i, vec)."""
        return Vector4._wrap(np.dot(self._m, vec._data))

    def transform_point(self, point):
        """
        Transform a 3D point (w = 1), dividing by the resulting w.

        When the resulting w is 0 (a point at infinity under a projection)
        the undivided x, y, z are returned.
        """
        x, y, z, w = np.dot(self._m, np.append(point._data, _ONE))
        if w == 0 or w == _ONE:
            return Vector3._wrap(np.array((x, y, z), dtype=_FLOAT))
        inv_w = _ONE / w
        return Vector3._wrap(np.array((x * inv_w, y * inv_w, z * inv_w), dtype=_FLOAT))

    def transform_direction(self, direction):
        """Transform a 3D direction (w = 0): translation does not apply."""
        return Vector3._wrap(np.dot(self._m[:3, :3], direction._data))

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def __mul__(self, other):
        if isinstance(other, Matrix4x4):
            return Matrix4x4._wrap(np.matmul(self._m, other._m))
        if isinstance(other, Vector4):
            return self.transform(other)
        if isinstance(other, numbers.Real):
            return Matrix4x4._wrap(self._m * other)
        return NotImplemented

    def __rmul__(self, scalar):
        if isinstance(scalar, numbers.Real):
            return Matrix4x4._wrap(self._m * scalar)
        return NotImplemented

    def __add__(self, other):
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4._wrap(self._m + other._m)

    def __sub__(self, other):
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return Matrix4x4._wrap(self._m - other._m)

    def __neg__(self):
        return Matrix4x4._wrap(-self._m)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def identity(cls):
        """Return a new 4x4 identity matrix."""
        return cls(_IDENTITY_4x4_TUPLE)

    @classmethod
    def translate(cls, *args):
        """Translation by (x, y, z) or a Vector3: M14, M24, M34 hold the offset."""
        x, y, z = unpack_args(*args)
        return cls((
            (1.0, 0.0, 0.0, x),
            (0.0, 1.0, 0.0, y),
            (0.0, 0.0, 1.0, z),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def scale(cls, *args):
        """Scale by (x, y, z), a Vector3, or one uniform factor."""
        if len(args) == 1 and isinstance(args[0], numbers.Real):
            x = y = z = args[0]
        else:
            x, y, z = unpack_args(*args)
        return cls((
            (x, 0.0, 0.0, 0.0),
            (0.0, y, 0.0, 0.0),
            (0.0, 0.0, z, 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def rotate_x(cls, angle):
        """Right-handed rotation about the X axis, angle in radians."""
        cos = _FLOAT(math.cos(angle))
        sin = _FLOAT(math.sin(angle))
        return cls((
            (1.0, 0.0, 0.0, 0.0),
            (0.0, cos, -sin, 0.0),
            (0.0, sin, cos, 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def rotate_y(cls, angle):
        """Right-handed rotation about the Y axis, angle in radians."""
        cos = _FLOAT(math.cos(angle))
        sin = _FLOAT(math.sin(angle))
        return cls((
            (cos, 0.0, sin, 0.0),
            (0.0, 1.0, 0.0, 0.0),
            (-sin, 0.0, cos, 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def rotate_z(cls, angle):
        """Right-handed rotation about the Z axis, angle in radians."""
        cos = _FLOAT(math.cos(angle))
        sin = _FLOAT(math.sin(angle))
        return cls((
            (cos, -sin, 0.0, 0.0),
            (sin, cos, 0.0, 0.0),
            (0.0, 0.0, 1.0, 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def rotate_axis(cls, axis, angle):
        """
        Rotation about an arbitrary axis (Rodrigues' formula).

        The axis must already be unit length; it is not normalised here.
        """
        x, y, z = (_FLOAT(v) for v in axis)
        cos = _FLOAT(math.cos(angle))
        sin = _FLOAT(math.sin(angle))
        cos1 = _ONE - cos

        xx1 = x * x * cos1
        xy1 = x * y * cos1
        xz1 = x * z * cos1
        yy1 = y * y * cos1
        yz1 = y * z * cos1
        zz1 = z * z * cos1

        sinx = x * sin
        siny = y * sin
        sinz = z * sin

        return cls((
            (cos + xx1, xy1 - sinz, xz1 + siny, 0.0),
            (xy1 + sinz, cos + yy1, yz1 - sinx, 0.0),
            (xz1 - siny, yz1 + sinx, cos + zz1, 0.0),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def orthographic_projection_rh(cls, left, right, bottom, top, near, far):
        """
        Right-handed orthographic projection of the box onto the clip cube.

        Raises:
            ValueError: If the box is flat along any axis.
        """
        _check_extent(left, right, 'left', 'right')
        _check_extent(bottom, top, 'bottom', 'top')
        _check_extent(near, far, 'near', 'far')

        width = right - left
        height = top - bottom
        depth = far - near
        return cls((
            (2.0 / width, 0.0, 0.0, -(right + left) / width),
            (0.0, 2.0 / height, 0.0, -(top + bottom) / height),
            (0.0, 0.0, -2.0 / depth, -(far + near) / depth),
            (0.0, 0.0, 0.0, 1.0)
        ))

    @classmethod
    def perspective_projection_rh(cls, left, right, bottom, top, near, far):
        """
        Right-handed perspective projection of the frustum onto the clip cube.

        Raises:
            ValueError: If near or far is not positive, near >= far, or the
                frustum has no width or height.
        """
        _check_extent(left, right, 'left', 'right')
        _check_extent(bottom, top, 'bottom', 'top')
        if near <= 0:
            raise ValueError(f"near must be greater than zero, got {near}")
        if far <= 0:
            raise ValueError(f"far must be greater than zero, got {far}")
        if near >= far:
            raise ValueError(f"near must be less than far, got near={near}, far={far}")

        width = right - left
        height = top - bottom
        depth = far - near
        return cls((
            ((2.0 * near) / width, 0.0, (right + left) / width, 0.0),
            (0.0, (2.0 * near) / height, (top + bottom) / height, 0.0),
            (0.0, 0.0, -(far + near) / depth, -(2.0 * far * near) / depth),
            (0.0, 0.0, -1.0, 0.0)
        ))

    @classmethod
    def perspective_projection_fov_rh(cls, fovy, aspect, near, far):
        """
        Right-handed perspective projection from a vertical field of view.

        Args:
            fovy: Vertical field of view in radians, in (0, PI].
            aspect: Width / height, greater than zero.

        Raises:
            ValueError: On any parameter outside its valid range.
        """
        if fovy <= 0 or fovy > PI:
            raise ValueError(f"fovy must be in (0, pi], got {fovy}")
        if aspect <= 0:
            raise ValueError(f"aspect must be greater than zero, got {aspect}")
        if near <= 0:
            raise ValueError(f"near must be greater than zero, got {near}")
        if far <= 0:
            raise ValueError(f"far must be greater than zero, got {far}")
        if near >= far:
            raise ValueError(f"near must be less than far, got near={near}, far={far}")

        top = near * math.tan(fovy * 0.5)
        bottom = -top
        return cls.perspective_projection_rh(bottom * aspect, top * aspect, bottom, top, near, far)

    # ------------------------------------------------------------------
    # Equality and conversion
    # ------------------------------------------------------------------

    def equals_exact(self, other):
        """Exact element-wise equality."""
        return isinstance(other, Matrix4x4) and bool(np.array_equal(self._m, other._m))

    def equals_within(self, other, epsilon):
        """True if every element differs by less than epsilon."""
        return bool(np.all(np.abs(self._m - other._m) < epsilon))

    def __eq__(self, other):
        if not isinstance(other, Matrix4x4):
            return NotImplemented
        return self.equals_exact(other)

    def __hash__(self):
        return hash(('Matrix4x4',) + tuple(self.to_list()))

    def copy(self):
        return Matrix4x4._wrap(self._m.copy())

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def __array__(self, dtype=None, copy=None):
        return np.array(self._m, dtype=dtype)

    def to_list(self):
        """Flat row-major list of 16 floats."""
        return [float(v) for v in self._m.ravel()]

    def to_rows(self):
        """Tuple-of-tuples, one per row."""
        return tuple(tuple(float(v) for v in row) for row in self._m)

    def to_numpy(self):
        """Return a (4, 4) float32 copy."""
        return self._m.copy()

    def __repr__(self):
        return f"Matrix4x4({self.to_list()!r})"

    def __str__(self):
        return "\n".join(f"[{', '.join(str(v) for v in row)}]" for row in self.to_rows())
