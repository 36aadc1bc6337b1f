"""Inflation of a rectangular pyramid around a sample point in a depth image."""

from __future__ import annotations

from typing import Iterable, Optional

from .camera import DepthCamera
from .pyramid import Pyramid

_UINT16_MAX = 0xFFFF


def _scan_edge(
    values: Iterable[int], ignore: int, min_depth: int, current: int
) -> tuple[bool, int]:
    """Scan one row or column next to an edge.

    Returns whether an obstacle closer than ``min_depth`` blocks the edge,
    and the running minimum of the pixel values seen.
    """
    for v in values:
        if v > ignore:
            if v < min_depth:
                return True, current
            current = min(current, v)
    return False, current


def inflate_pyramid(
    camera: DepthCamera,
    x0: float,
    y0: float,
    minimum_depth: float,
    buffer: int = 2,
) -> Optional[Pyramid]:
    """Try to build a pyramid containing the sample point at pixel ``(x0, y0)``.

    The base plane of the pyramid lies deeper than ``minimum_depth``. The
    rectangle is first grown in a spiral until it hits obstacles or the
    field-of-view limits, then shrunk so that every obstacle keeps at least
    the planning radius from the lateral faces. Returns None if no such
    pyramid exists.
    """
    x0 = int(x0)
    y0 = int(y0)
    w, h = camera.width, camera.height
    offset = camera.image_edge_offset
    scale = camera.depth_scale
    f = camera.focal_length
    radius = camera.vehicle_radius_for_planning

    if (
        x0 <= offset + buffer + 1
        or x0 > w - offset - buffer - 1
        or y0 <= offset + buffer + 1
        or y0 > h - offset - buffer - 1
    ):
        return None

    min_pyr_depth = int((minimum_depth + radius) / scale)
    if min_pyr_depth <= 0 or min_pyr_depth > _UINT16_MAX:
        return None

    init_radius = int(f * radius / (scale * min_pyr_depth))
    if 2 * init_radius >= min(w, h) - 2 * offset:
        return None

    if y0 - init_radius < offset:
        top = offset
        bottom = top + 2 * init_radius
    else:
        bottom = min(h - offset - 1, y0 + init_radius)
        top = bottom - 2 * init_radius
    if x0 - init_radius < offset:
        left = offset
        right = left + 2 * init_radius
    else:
        right = min(w - offset - 1, x0 + init_radius)
        left = right - 2 * init_radius

    ignore = camera.ignore_distance
    block = camera.depth_image[top:bottom, left:right]
    if ((block <= min_pyr_depth) & (block > ignore)).any():
        return None

    px = camera.depth_image.tolist()
    max_depth = _UINT16_MAX

    right_free = top_free = left_free = bottom_free = True
    while right_free or top_free or left_free or bottom_free:
        if right_free:
            if right < w - offset - 1:
                blocked, max_depth = _scan_edge(
                    (px[y][right + 1] for y in range(top, bottom + 1)),
                    ignore, min_pyr_depth, max_depth,
                )
                if blocked:
                    right_free = False
                else:
                    right += 1
            else:
                right_free = False
        if top_free:
            if top > offset:
                blocked, max_depth = _scan_edge(
                    (px[top - 1][x] for x in range(left, right + 1)),
                    ignore, min_pyr_depth, max_depth,
                )
                if blocked:
                    top_free = False
                else:
                    top -= 1
            else:
                top_free = False
        if left_free:
            if left > offset:
                blocked, max_depth = _scan_edge(
                    (px[y][left - 1] for y in range(top, bottom + 1)),
                    ignore, min_pyr_depth, max_depth,
                )
                if blocked:
                    left_free = False
                else:
                    left -= 1
            else:
                left_free = False
        if bottom_free:
            if bottom < h - offset - 1:
                blocked, max_depth = _scan_edge(
                    (px[bottom + 1][x] for x in range(left, right + 1)),
                    ignore, min_pyr_depth, max_depth,
                )
                if blocked:
                    bottom_free = False
                else:
                    bottom += 1
            else:
                bottom_free = False

    r_s = w - 1 - offset
    l_s = offset
    t_s = offset
    b_s = h - 1 - offset
    numerator = int(f * radius / scale)

    def obstacle(x: int, y: int) -> Optional[int]:
        pd = px[y][x]
        if ignore < pd < max_depth:
            return pd
        return None

    # Right side
    for x in range(right, w):
        for y in range(top, bottom + 1):
            pd = obstacle(x, y)
            if pd is None or not numerator > (x - r_s) * pd:
                continue
            q = numerator // pd
            rt = x - q
            if x0 > rt - buffer:
                tt, bt = y + q, y - q
                if y0 < tt + buffer and y0 > bt - buffer:
                    return None
                elif y0 < tt + buffer:
                    b_s = bt
                elif y0 > bt - buffer:
                    t_s = tt
                elif (b_s - bt) > (tt - t_s):
                    t_s = tt
                else:
                    r_s = bt
            else:
                r_s = rt

    # Left side
    for x in range(left, -1, -1):
        for y in range(top, bottom + 1):
            pd = obstacle(x, y)
            if pd is None or not (l_s - x) * pd < numerator:
                continue
            q = numerator // pd
            lt = x + q
            if x0 < lt + buffer:
                tt, bt = y + q, y - q
                if y0 < tt + buffer and y0 > bt - buffer:
                    return None
                elif y0 < tt + buffer:
                    b_s = bt
                elif y0 > bt - buffer:
                    t_s = tt
                elif (b_s - bt) > (tt - t_s):
                    t_s = tt
                else:
                    b_s = bt
            else:
                l_s = lt
    if l_s + buffer > r_s - buffer:
        return None

    # Top side
    for y in range(top, -1, -1):
        for x in range(left, right + 1):
            pd = obstacle(x, y)
            if pd is None or not (t_s - y) * pd < numerator:
                continue
            q = numerator // pd
            tt = y + q
            if y0 < tt + buffer:
                rt, lt = x - q, x + q
                if x0 > rt - buffer and x0 < lt + buffer:
                    return None
                elif x0 > rt - buffer:
                    l_s = lt
                elif x0 < lt + buffer:
                    r_s = rt
                elif (r_s - rt) > (lt - l_s):
                    l_s = lt
                else:
                    r_s = rt
            else:
                t_s = tt

    # Bottom side
    for y in range(bottom, h):
        for x in range(left, right + 1):
            pd = obstacle(x, y)
            if pd is None or not numerator > (y - b_s) * pd:
                continue
            q = numerator // pd
            bt = y - q
            if y0 > bt - buffer:
                rt, lt = x - q, x + q
                if x0 > rt - buffer and x0 < lt + buffer:
                    return None
                elif x0 > rt - buffer:
                    l_s = lt
                elif x0 < lt + buffer:
                    r_s = rt
                elif (r_s - rt) > (lt - l_s):
                    l_s = lt
                else:
                    r_s = rt
            else:
                b_s = bt
    if t_s + buffer > b_s - buffer:
        return None

    # Top right corner
    for y in range(top, -1, -1):
        for x in range(right, w):
            pd = obstacle(x, y)
            if pd is None:
                continue
            if not (numerator > (x - r_s) * pd and (t_s - y) * pd < numerator):
                continue
            q = numerator // pd
            rt, tt = x - q, y + q
            blocks_right = x0 > rt - buffer
            blocks_top = y0 < tt + buffer
            if blocks_right and blocks_top:
                return None
            elif blocks_right:
                t_s = tt
            elif blocks_top:
                r_s = rt
            elif (r_s - rt) * (b_s - t_s) > (tt - t_s) * (r_s - l_s):
                t_s = tt
            else:
                r_s = rt

    # Bottom right corner
    for y in range(bottom, h):
        for x in range(right, w):
            pd = obstacle(x, y)
            if pd is None:
                continue
            if not (numerator > (x - r_s) * pd and numerator > (y - b_s) * pd):
                continue
            q = numerator // pd
            rt, bt = x - q, y - q
            blocks_right = x0 > rt - buffer
            blocks_bottom = y0 > bt - buffer
            if blocks_right and blocks_bottom:
                return None
            elif blocks_right:
                b_s = bt
            elif blocks_bottom:
                r_s = rt
            elif (r_s - rt) * (b_s - t_s) > (b_s - bt) * (r_s - l_s):
                b_s = bt
            else:
                r_s = rt

    # Top left corner
    for y in range(top, -1, -1):
        for x in range(left, -1, -1):
            pd = obstacle(x, y)
            if pd is None:
                continue
            if not ((l_s - x) * pd < numerator and (t_s - y) * pd < numerator):
                continue
            q = numerator // pd
            lt, tt = x + q, y + q
            blocks_left = x0 < lt + buffer
            blocks_top = y0 < tt + buffer
            if blocks_left and blocks_top:
                return None
            elif blocks_left:
                t_s = tt
            elif blocks_top:
                l_s = lt
            elif (lt - l_s) * (b_s - t_s) > (tt - t_s) * (r_s - l_s):
                t_s = tt
            else:
                l_s = lt

    # Bottom left corner
    for y in range(bottom, h):
        for x in range(left, -1, -1):
            pd = obstacle(x, y)
            if pd is None:
                continue
            if not ((l_s - x) * pd < numerator and numerator > (y - b_s) * pd):
                continue
            q = numerator // pd
            lt, bt = x + q, y - q
            blocks_left = x0 < lt + buffer
            blocks_bottom = y0 > bt - buffer
            if blocks_left and blocks_bottom:
                return None
            elif blocks_left:
                b_s = bt
            elif blocks_bottom:
                l_s = lt
            elif (lt - l_s) * (b_s - t_s) > (b_s - bt) * (r_s - l_s):
                b_s = bt
            else:
                l_s = lt

    depth = max_depth * scale - radius
    corners = [
        camera.deproject_pixel(float(r_s), float(t_s), depth),
        camera.deproject_pixel(float(l_s), float(t_s), depth),
        camera.deproject_pixel(float(l_s), float(b_s), depth),
        camera.deproject_pixel(float(r_s), float(b_s), depth),
    ]
    return Pyramid.from_corners(depth, (r_s, t_s, l_s, b_s), corners)