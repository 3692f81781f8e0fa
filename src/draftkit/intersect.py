## intersection engine for draftkit primitives

## Copyright (c) 2026 draftkit contributors

# Permission is hereby granted, free of charge, to any person
# obtaining a copy of this software and associated documentation files
# (the "Software"), to deal in the Software without restriction,
# including without limitation the rights to use, copy, modify, merge,
# publish, distribute, sublicense, and/or sell copies of the Software,
# and to permit persons to whom the Software is furnished to do so,
# subject to the following conditions:
#
# The above copyright notice and this permission notice shall be
# included in all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND,
# EXPRESS OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF
# MERCHANTABILITY, FITNESS FOR A PARTICULAR PURPOSE AND
# NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR COPYRIGHT HOLDERS
# BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER IN AN
# ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
# CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
Intersections between geometric primitives.

``intersection_points(a, b, inside=True)`` returns the list of points
shared by primitives ``a`` and ``b``, deduplicated within ``epsilon``.
If ``inside`` is true, line segments are bounded by their end points
and arcs by their angular spans.  If ``inside`` is false, lines are
treated as infinite and ellipses as closed curves, which is what the
extend operation needs.

Conics are handled in unit-circle space: the first ellipse's
``unit_circle_projection()`` maps it onto the unit circle in the local
XY plane, which turns every line/ellipse problem into a line/unit
circle problem and every coplanar ellipse/ellipse problem into a
unit circle/ellipse problem.
"""

import logging
from math import atan, cos, sin, sqrt

import mpmath as mpm
import numpy as np

from draftkit.geom import Point, Vector, epsilon, unique_points
from draftkit.primitives import PrimitiveKind, PrimitiveLine, is_point_on

logger = logging.getLogger(__name__)

## Newton refinement of quartic roots
_NEWTON_STEPS = 12


## line/line
## ---------

def _line_line(l1, l2, inside=True):
    d1 = l1.direction
    d2 = l2.direction
    if d1.is_zero_vector or d2.is_zero_vector:
        logger.debug("degenerate line in line/line intersection")
        return []
    n = d1.cross(d2)
    nn = n.length_squared
    if nn < epsilon * epsilon:
        ## parallel or coincident
        return []
    w = l2.p1 - l1.p1
    if abs(w.dot(n)) / sqrt(nn) > epsilon:
        ## skew lines
        return []
    t = w.cross(d2).dot(n) / nn
    u = w.cross(d1).dot(n) / nn
    if inside:
        tol1 = epsilon / d1.length
        tol2 = epsilon / d2.length
        if t < -tol1 or t > 1.0 + tol1 or u < -tol2 or u > 1.0 + tol2:
            return []
    return [l1.sample(t)]


## line/ellipse
## ------------

def _unit_circle_params(p, q):
    """
    parameters ``t`` where the (local XY) line ``p + t(q - p)`` meets
    the unit circle, computed with extended precision
    """
    vx = mpm.mpf(q.x - p.x)
    vy = mpm.mpf(q.y - p.y)
    px = mpm.mpf(p.x)
    py = mpm.mpf(p.y)
    mpepsilon = mpm.mpf(epsilon)

    ## solve for t in:  | t*V + P |^2 = 1
    ##   t^2(Vx^2 + Vy^2) + 2t(VxPx + VyPy) + Px^2 + Py^2 - 1 = 0
    a = vx * vx + vy * vy
    if mpm.fabs(a) < mpepsilon * mpepsilon:
        return []
    b = 2 * (vx * px + vy * py)
    cc = px * px + py * py - 1
    d = b * b - 4 * a * cc
    ## within epsilon, scaled by the length of the line: tangent
    if mpm.fabs(d) < mpm.sqrt(a) * 2 * mpepsilon:
        return [float(-b / (2 * a))]
    if d < 0:
        return []
    root = mpm.sqrt(d)
    return [float((-b + root) / (2 * a)), float((-b - root) / (2 * a))]


def _line_ellipse(line, el, bound_line=True, bound_curve=True):
    if line.direction.is_zero_vector:
        logger.debug("degenerate line in line/ellipse intersection")
        return []
    m = el.unit_circle_projection()
    p = m.mul(line.p1)
    q = m.mul(line.p2)
    dz = q.z - p.z
    if abs(p.z) < epsilon and abs(q.z) < epsilon:
        params = _unit_circle_params(p, q)
    elif abs(dz) < epsilon:
        ## parallel to the ellipse plane but off it
        return []
    else:
        ## the line pierces the plane at a single point
        t = -p.z / dz
        if not el.is_point_on(line.sample(t), inside=False):
            return []
        params = [t]

    tol = epsilon / line.length
    result = []
    for t in params:
        if bound_line and (t < -tol or t > 1.0 + tol):
            continue
        pt = line.sample(t)
        if bound_curve and not el.contains_angle(el.angle_of(pt)):
            continue
        result.append(pt)
    return result


## ellipse/ellipse
## ---------------

def _coincident_unit_circle(c, a, b):
    return abs(c.x) < epsilon and abs(c.y) < epsilon and \
        abs(a.length - 1.0) < epsilon and abs(b.length - 1.0) < epsilon and \
        abs(a.dot(b)) < epsilon


def _radical_line_points(c, r):
    """
    intersections of the unit circle with the circle of radius ``r``
    centered at local point ``c`` (both in the local XY plane)
    """
    cc = c.x * c.x + c.y * c.y
    if cc < epsilon * epsilon:
        ## concentric
        return []
    ## subtracting the circle equations gives the radical line c.X = k
    k = (1.0 - r * r + cc) / 2.0
    x0 = Point(c.x * k / cc, c.y * k / cc, 0.0)
    h = sqrt(x0.x * x0.x + x0.y * x0.y)
    if h > 1.0 + epsilon:
        return []
    if abs(h - 1.0) < epsilon:
        return [x0]
    s = sqrt(1.0 - h * h)
    cl = sqrt(cc)
    perp = Vector(-c.y / cl, c.x / cl, 0.0)
    return [x0 + perp * s, x0 - perp * s]


def _quartic_angles(c, a, b):
    """
    Parameter angles (radians) of the points where the local-space
    ellipse ``c + a cos(phi) + b sin(phi)`` meets the unit circle.

    Squaring the distance from the origin and substituting
    t = tan(phi/2) gives a quartic in t.
    """
    K = c.dot(c) - 1.0
    aa = a.dot(a)
    bb = b.dot(b)
    ca = c.dot(a)
    cb = c.dot(b)
    ab = a.dot(b)
    coeffs = [K + aa - 2 * ca,
              4 * cb - 4 * ab,
              2 * K - 2 * aa + 4 * bb,
              4 * cb + 4 * ab,
              K + aa + 2 * ca]

    def f(phi):
        x = c + a * cos(phi) + b * sin(phi)
        return x.dot(x) - 1.0

    def df(phi):
        x = c + a * cos(phi) + b * sin(phi)
        dx = a * -sin(phi) + b * cos(phi)
        return 2.0 * x.dot(dx)

    scale = max(abs(x) for x in coeffs)
    if scale < epsilon:
        return []
    coeffs = [x / scale for x in coeffs]

    angles = []
    ## a vanishing leading coefficient means t -> infinity is a root,
    ## which is phi = pi
    while coeffs and abs(coeffs[0]) < epsilon:
        if not angles:
            angles.append(np.pi)
        coeffs = coeffs[1:]
    if len(coeffs) > 1:
        for root in np.roots(coeffs):
            if abs(root.imag) > 1e-5 * max(1.0, abs(root.real)):
                continue
            angles.append(2.0 * atan(root.real))

    refined = []
    for phi in angles:
        for _ in range(_NEWTON_STEPS):
            slope = df(phi)
            if abs(slope) < epsilon * epsilon:
                break
            step = f(phi) / slope
            phi -= step
            if abs(step) < 1e-14:
                break
        if abs(f(phi)) < 1e-6:
            refined.append(phi)
    return refined


def _coplanar_ellipses(e1, e2):
    m = e1.unit_circle_projection()
    c = m.mul(e2.center).as_vector()
    a = m.mul(e2.major_axis)
    b = m.mul(e2.minor_axis)
    if _coincident_unit_circle(c, a, b):
        logger.debug("coincident ellipses have no discrete intersections")
        return []
    if abs(a.length - b.length) < epsilon and abs(a.dot(b)) < epsilon:
        local = _radical_line_points(c, a.length)
    else:
        local = [(c + a * cos(phi) + b * sin(phi)).as_point()
                 for phi in _quartic_angles(c, a, b)]
    to_world = e1.from_unit_circle_projection()
    return [to_world.mul(Point(p.x, p.y, 0.0)) for p in local]


def _plane_intersection_line(e1, e2):
    """a point and unit direction of the line common to both ellipse
    planes"""
    n1 = e1.normal.normalize()
    n2 = e2.normal.normalize()
    direction = n1.cross(n2)
    d1 = n1.dot(e1.center.as_vector())
    d2 = n2.dot(e2.center.as_vector())
    n12 = n1.dot(n2)
    det = 1.0 - n12 * n12
    origin = (n1 * (d1 - d2 * n12) + n2 * (d2 - d1 * n12)) / det
    return origin.as_point(), direction.normalize()


def _ellipse_ellipse(e1, e2, inside=True):
    n1 = e1.normal.normalize()
    n2 = e2.normal.normalize()
    if n1.is_parallel_to(n2):
        if abs((e2.center - e1.center).dot(n1)) > epsilon:
            ## parallel planes
            return []
        points = _coplanar_ellipses(e1, e2)
    else:
        origin, direction = _plane_intersection_line(e1, e2)
        common = PrimitiveLine(origin, origin + direction)
        points = [p for p in _line_ellipse(common, e1, bound_line=False, bound_curve=False)
                  if e2.is_point_on(p, inside=False)]
    if inside:
        points = [p for p in points
                  if e1.contains_angle(e1.angle_of(p)) and e2.contains_angle(e2.angle_of(p))]
    return points


## dispatch
## --------

def intersection_points(a, b, inside=True):
    """
    Return the list of intersections of primitives ``a`` and ``b``.

    Text primitives never intersect anything; a point primitive
    intersects whatever it lies on.
    """
    ka = a.kind
    kb = b.kind
    if ka == PrimitiveKind.TEXT or kb == PrimitiveKind.TEXT:
        points = []
    elif ka == PrimitiveKind.POINT:
        points = [a.location] if b.is_point_on(a.location, inside) else []
    elif kb == PrimitiveKind.POINT:
        points = [b.location] if a.is_point_on(b.location, inside) else []
    elif ka == PrimitiveKind.LINE and kb == PrimitiveKind.LINE:
        points = _line_line(a, b, inside)
    elif ka == PrimitiveKind.LINE and kb == PrimitiveKind.ELLIPSE:
        points = _line_ellipse(a, b, inside, inside)
    elif ka == PrimitiveKind.ELLIPSE and kb == PrimitiveKind.LINE:
        points = _line_ellipse(b, a, inside, inside)
    elif ka == PrimitiveKind.ELLIPSE and kb == PrimitiveKind.ELLIPSE:
        points = _ellipse_ellipse(a, b, inside)
    else:
        raise ValueError('bad primitive kinds passed to intersection_points: {}, {}'.format(ka, kb))
    return unique_points(points)


def intersect_primitives(first, second, inside=True):
    """all intersections between two collections of primitives"""
    points = []
    for a in first:
        for b in second:
            points.extend(intersection_points(a, b, inside))
    return unique_points(points)


def intersect_entities(e1, e2, inside=True):
    return intersect_primitives(e1.primitives, e2.primitives, inside)


__all__ = [
    "intersection_points",
    "intersect_primitives",
    "intersect_entities",
    "is_point_on",
]
