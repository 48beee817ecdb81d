"""
Fixed-size single precision vectors.

Vector2, Vector3 and Vector4 share one implementation (VectorBase) and differ
only in their component count and a few extras: cross() on Vector3,
xyz() and from_vector3() on Vector4.

Components are stored in a numpy float32 array. Every operation returns a new
vector; the only in-place mutators are normalise() and component assignment.
Use copy() where an independent value is needed.
"""
import math
import numbers

import numpy as np

from nml.nml_config import get_config, warn_degenerate

_FLOAT = np.float32


def _component(index, name):
    """Build a read/write property for one named component."""
    def getter(self):
        return float(self._data[index])

    def setter(self, value):
        self._data[index] = value

    return property(getter, setter, doc=f"The {name} component.")


def _is_scalar(value):
    return isinstance(value, numbers.Real)


class VectorBase:
    """
    Shared algebra for fixed-size float32 tuples.

    Subclasses set SIZE. Construction accepts:
        - no arguments: all components zero
        - one number: every component set to that value
        - one sequence of exactly SIZE values
        - up to SIZE individual components (missing ones are zero)
    """
    __slots__ = ('_data',)

    SIZE = 0

    # Make numpy defer to our operators instead of broadcasting over us
    __array_ufunc__ = None

    def __init__(self, *args):
        size = self.SIZE
        name = type(self).__name__
        if not args:
            data = np.zeros(size, dtype=_FLOAT)
        elif len(args) == 1:
            # Fast path: a single number fills every component
            try:
                data = np.full(size, float(args[0]), dtype=_FLOAT)
            except TypeError:
                data = _from_sequence(args[0], size, name)
        elif len(args) <= size:
            data = np.zeros(size, dtype=_FLOAT)
            data[:len(args)] = args
        else:
            raise ValueError(f"{name} takes at most {size} components, got {len(args)}")
        self._data = data

    @classmethod
    def _wrap(cls, data):
        """Adopt an array the caller no longer references."""
        vector = cls.__new__(cls)
        vector._data = np.asarray(data, dtype=_FLOAT)
        return vector

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls._wrap(np.ones(cls.SIZE, dtype=_FLOAT))

    @classmethod
    def _unit(cls, index):
        data = np.zeros(cls.SIZE, dtype=_FLOAT)
        data[index] = 1.0
        return cls._wrap(data)

    @classmethod
    def unit_x(cls):
        return cls._unit(0)

    @classmethod
    def unit_y(cls):
        return cls._unit(1)

    # ------------------------------------------------------------------
    # Sequence protocol
    # ------------------------------------------------------------------

    def _check_index(self, index):
        if isinstance(index, bool) or not isinstance(index, numbers.Integral):
            raise TypeError(f"{type(self).__name__} indices must be integers, not {type(index).__name__}")
        if not 0 <= index < self.SIZE:
            raise IndexError(f"{type(self).__name__} index {index} out of range")
        return int(index)

    def __getitem__(self, index):
        return float(self._data[self._check_index(index)])

    def __setitem__(self, index, value):
        self._data[self._check_index(index)] = value

    def __iter__(self):
        for value in self._data:
            yield float(value)

    def __len__(self):
        return self.SIZE

    def __array__(self, dtype=None, copy=None):
        return np.array(self._data, dtype=dtype)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __add__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._wrap(self._data + other._data)

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._wrap(self._data - other._data)

    def __mul__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        return self._wrap(self._data * scalar)

    def __rmul__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        return self._wrap(self._data * scalar)

    def __truediv__(self, scalar):
        if not _is_scalar(scalar):
            return NotImplemented
        # Division by zero yields inf/nan components, as in float arithmetic
        with np.errstate(divide='ignore', invalid='ignore'):
            return self._wrap(self._data / _FLOAT(scalar))

    def __neg__(self):
        return self._wrap(-self._data)

    def dot(self, other):
        """Dot product."""
        return float(np.dot(self._data, other._data))

    def length_squared(self):
        """Squared length (avoids sqrt)."""
        data = self._data.astype(np.float64)
        return float(np.dot(data, data))

    def length(self):
        """Vector length/magnitude."""
        return math.sqrt(self.length_squared())

    def is_normalised(self):
        """True if the squared length is within the configured tolerance of 1."""
        return abs(self.length_squared() - 1.0) < get_config().normalised_tolerance

    def normalised(self):
        """
        Return a unit-length copy.

        A vector whose squared length does not exceed the configured threshold
        cannot be scaled reliably; unit X is returned in its place.
        """
        length_squared = self.length_squared()
        if length_squared > get_config().normalise_threshold:
            return self._wrap(self._data.astype(np.float64) / math.sqrt(length_squared))
        warn_degenerate(f"Normalising a zero-length {type(self).__name__}; returning unit X")
        return self.unit_x()

    def normalise(self):
        """Normalise in place."""
        self._data = self.normalised()._data

    def distance_squared(self, other):
        """Squared distance between two points."""
        diff = self._data.astype(np.float64) - other._data
        return float(np.dot(diff, diff))

    def distance(self, other):
        """Distance between two points."""
        return math.sqrt(self.distance_squared(other))

    def lerp(self, other, t):
        """Linear interpolation, t=0 gives self and t=1 gives other."""
        return self._wrap(self._data + (other._data - self._data) * t)

    # ------------------------------------------------------------------
    # Equality and conversion
    # ------------------------------------------------------------------

    def equals_exact(self, other):
        """Exact component-wise equality."""
        return type(other) is type(self) and bool(np.array_equal(self._data, other._data))

    def equals_within(self, other, epsilon):
        """True if every component differs by less than epsilon."""
        return bool(np.all(np.abs(self._data - other._data) < epsilon))

    def __eq__(self, other):
        if not isinstance(other, VectorBase):
            return NotImplemented
        return self.equals_exact(other)

    def __hash__(self):
        return hash((type(self).__name__,) + self.to_tuple())

    def copy(self):
        return self._wrap(self._data.copy())

    __copy__ = copy

    def __deepcopy__(self, memo):
        return self.copy()

    def to_tuple(self):
        """Convert to tuple."""
        return tuple(float(v) for v in self._data)

    def to_list(self):
        """Convert to list."""
        return [float(v) for v in self._data]

    def to_numpy(self):
        """Return a float32 copy of the components."""
        return self._data.copy()

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(repr(v) for v in self)})"

    def __str__(self):
        return f"({', '.join(str(v) for v in self)})"


def _from_sequence(values, size, name):
    try:
        data = np.array(values, dtype=_FLOAT)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} expects {size} numeric values, got {values!r}") from e
    if data.shape != (size,):
        raise ValueError(f"{name} expects {size} values, got {data.size}")
    return data


class Vector2(VectorBase):
    __slots__ = ()
    SIZE = 2

    x = _component(0, 'x')
    y = _component(1, 'y')


class Vector3(VectorBase):
    __slots__ = ()
    SIZE = 3

    x = _component(0, 'x')
    y = _component(1, 'y')
    z = _component(2, 'z')

    @classmethod
    def unit_z(cls):
        return cls._unit(2)

    def cross(self, other):
        """Cross product."""
        ax, ay, az = self._data
        bx, by, bz = other._data
        return Vector3._wrap(np.array((
            ay * bz - az * by,
            az * bx - ax * bz,
            ax * by - ay * bx,
        ), dtype=_FLOAT))


class Vector4(VectorBase):
    __slots__ = ()
    SIZE = 4

    x = _component(0, 'x')
    y = _component(1, 'y')
    z = _component(2, 'z')
    w = _component(3, 'w')

    @classmethod
    def unit_z(cls):
        return cls._unit(2)

    @classmethod
    def unit_w(cls):
        return cls._unit(3)

    @classmethod
    def from_vector3(cls, vector, w=0.0):
        """Extend a Vector3 with a w component (1 for points, 0 for directions)."""
        data = np.empty(4, dtype=_FLOAT)
        data[:3] = vector._data
        data[3] = w
        return cls._wrap(data)

    def xyz(self):
        """Drop the w component."""
        return Vector3._wrap(self._data[:3].copy())
