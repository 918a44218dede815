"""Small 3-vector helpers shared by the coercion layer and components."""

import math

from ._value import Plane, Vec3

EPSILON = 1e-9


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a: Vec3, factor: float) -> Vec3:
    return (a[0] * factor, a[1] * factor, a[2] * factor)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(a: Vec3) -> float:
    return math.sqrt(dot(a, a))


def distance(a: Vec3, b: Vec3) -> float:
    return length(sub(a, b))


def normalize(a: Vec3) -> Vec3 | None:
    """Return the unit vector along ``a``, or None when ``a`` is (near) zero."""
    norm = length(a)
    if norm < EPSILON:
        return None
    return scale(a, 1.0 / norm)


def orthogonal(a: Vec3) -> Vec3:
    """Return some unit vector perpendicular to ``a`` (``a`` must be non-zero)."""
    # World Y unless a is nearly parallel to it; for a = +Z this yields +X.
    helper: Vec3 = (0.0, 1.0, 0.0) if abs(a[1]) < 0.9 else (1.0, 0.0, 0.0)  # noqa: PLR2004
    result = normalize(cross(helper, a))
    if result is None:
        return (0.0, 0.0, 1.0)
    return result


def plane_from_axes(origin: Vec3, x_dir: Vec3, y_dir: Vec3) -> Plane | None:
    """Build an orthonormal plane from an origin and two in-plane directions.

    The x axis keeps the direction of ``x_dir``; ``y_dir`` is orthogonalized
    against it (Gram-Schmidt) and the z axis is their cross product.

    Returns:
        The plane, or None when the directions are degenerate or parallel.

    """
    x_axis = normalize(x_dir)
    if x_axis is None:
        return None
    y_axis = normalize(sub(y_dir, scale(x_axis, dot(y_dir, x_axis))))
    if y_axis is None:
        return None
    z_axis = normalize(cross(x_axis, y_axis))
    if z_axis is None:
        return None
    return Plane(origin=origin, x_axis=x_axis, y_axis=y_axis, z_axis=z_axis)


def plane_from_normal(origin: Vec3, normal: Vec3) -> Plane | None:
    """Build a plane at ``origin`` whose z axis is ``normalize(normal)``."""
    z_axis = normalize(normal)
    if z_axis is None:
        return None
    x_axis = orthogonal(z_axis)
    y_axis = cross(z_axis, x_axis)
    return Plane(origin=origin, x_axis=x_axis, y_axis=y_axis, z_axis=z_axis)
