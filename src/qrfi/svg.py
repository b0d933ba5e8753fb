"""SVG export helpers for QR modules."""

from __future__ import annotations

from typing import Dict, List, Sequence, Set, Tuple

Coordinate = Tuple[int, int]


def qr_matrix_to_svg(
    matrix: Sequence[Sequence[bool]],
    min_size: int = 200,
    *,
    dark_color: str = "#000000",
    light_color: str = "#ffffff",
) -> str:
    size = len(matrix)
    if size == 0:
        raise ValueError("matrix must not be empty")
    if min_size < 0:
        raise ValueError("min_size must not be negative")

    dark_modules: Set[Coordinate] = {
        (x, y)
        for y, row in enumerate(matrix)
        for x, value in enumerate(row)
        if value
    }
    path_data = [_loop_path(loop) for loop in _outline_loops(dark_modules)]

    pixels = size * max(1, -(-min_size // size))
    header = _svg_header(size, pixels, light_color)
    body = []
    if path_data:
        body.append(
            f'<path fill="{dark_color}" fill-rule="evenodd" d="{"".join(path_data)}"/>'
        )
    return "\n".join(header + body + _svg_footer())


def _boundary_edges(modules: Set[Coordinate]) -> Dict[Coordinate, List[Coordinate]]:
    """Map each corner to the corners reached by exposed module sides, walking clockwise."""
    edges: Dict[Coordinate, List[Coordinate]] = {}
    for x, y in modules:
        sides = (
            ((x, y - 1), (x, y), (x + 1, y)),
            ((x + 1, y), (x + 1, y), (x + 1, y + 1)),
            ((x, y + 1), (x + 1, y + 1), (x, y + 1)),
            ((x - 1, y), (x, y + 1), (x, y)),
        )
        for neighbor, start, end in sides:
            if neighbor not in modules:
                edges.setdefault(start, []).append(end)
    return edges


def _outline_loops(modules: Set[Coordinate]) -> List[List[Coordinate]]:
    # Even-odd filling does not depend on how edges group into loops.
    edges = _boundary_edges(modules)
    loops: List[List[Coordinate]] = []
    while edges:
        corner = min(edges)
        loop = [corner]
        while True:
            targets = edges[corner]
            following = targets.pop()
            if not targets:
                del edges[corner]
            corner = following
            if corner == loop[0]:
                break
            loop.append(corner)
        loops.append(_drop_collinear(loop))
    return loops


def _drop_collinear(loop: Sequence[Coordinate]) -> List[Coordinate]:
    n = len(loop)
    result: List[Coordinate] = []
    for i in range(n):
        px, py = loop[(i - 1) % n]
        cx, cy = loop[i]
        nx, ny = loop[(i + 1) % n]
        if (cx - px) * (ny - cy) - (cy - py) * (nx - cx) != 0:
            result.append(loop[i])
    return result


def _loop_path(loop: Sequence[Coordinate]) -> str:
    first_x, first_y = loop[0]
    segments = [f"M{first_x} {first_y}"]
    segments.extend(f"L{x} {y}" for x, y in loop[1:])
    segments.append("Z")
    return "".join(segments)


def _svg_header(size: int, pixels: int, light_color: str) -> List[str]:
    return [
        '<?xml version="1.0" standalone="yes"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" width="{pixels}" height="{pixels}" '
        f'viewBox="0 0 {size} {size}" shape-rendering="crispEdges">',
        f'<rect width="{size}" height="{size}" fill="{light_color}"/>',
    ]


def _svg_footer() -> List[str]:
    return ["</svg>"]
