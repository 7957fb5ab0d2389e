"""
Plate Dot Generator

Lays out a pseudoisochromatic plate as a field of coloured dots:
- hexagonal packing over the plate square at a fixed density
- points outside the plate circle discarded
- small positional jitter and radius variance
- figure or background palette chosen by the digit mask cell under the dot
  centre (no boundary sampling, so glyph edges stay crisp)

All randomness comes from a generator seeded with the plate id, so a plate
renders identically every time at a given size.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from ..config import settings
from ..errors import InvalidResponseError
from .plates import IshiharaPlate, get_plate
from .rng import LcgRandom, RandomFactory

log = logging.getLogger(__name__)

# Base dot radius as a fraction of grid spacing; leaves a small gap between dots
DOT_FILL = 0.45


@dataclass(frozen=True)
class GeneratedDot:
    x: float
    y: float
    radius: float
    color: str
    in_figure: bool


def hex_grid(size: float, spacing: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Hexagonally packed points inside the inscribed circle of a size x size square.

    Points closer than one spacing to the rim are dropped so that jittered dots
    stay on the plate. Returned in row-major order.
    """
    radius = size / 2.0
    row_h = spacing * math.sqrt(3) / 2.0
    xs = (np.arange(int(size // spacing) + 1) + 0.5) * spacing
    ys = (np.arange(int(size // row_h) + 1) + 0.5) * row_h
    X, Y = np.meshgrid(xs, ys)
    X[1::2] += spacing / 2.0
    keep = (X - radius) ** 2 + (Y - radius) ** 2 <= (radius - spacing) ** 2
    return X[keep], Y[keep]


def _mask_cell(coord: float, size: float, grid: int) -> int:
    return min(max(int(coord / size * grid), 0), grid - 1)


def generate_dots(plate: IshiharaPlate, render_size_px: float,
                  rng_factory: RandomFactory = LcgRandom,
                  spacing_fraction: Optional[float] = None,
                  jitter: Optional[float] = None,
                  radius_variance: Optional[float] = None) -> Tuple[GeneratedDot, ...]:
    """
    Generate the dot field for one plate.

    Args:
        plate: Catalogue entry to render
        render_size_px: Side of the square render target
        rng_factory: Builds the seeded generator from the plate id
        spacing_fraction: Grid spacing as a fraction of render size
        jitter: Max positional offset as a fraction of spacing
        radius_variance: Max relative radius change

    Returns:
        Dots in deterministic order
    """
    if not (isinstance(render_size_px, (int, float)) and math.isfinite(render_size_px) and render_size_px > 0):
        raise InvalidResponseError(f"render size must be a positive number, got {render_size_px!r}")
    spacing_fraction = settings.plate_dot_spacing if spacing_fraction is None else spacing_fraction
    jitter = settings.plate_jitter if jitter is None else jitter
    radius_variance = settings.plate_radius_variance if radius_variance is None else radius_variance

    size = float(render_size_px)
    spacing = size * spacing_fraction
    base_radius = spacing * DOT_FILL
    grid = plate.grid_size
    rng = rng_factory(plate.id)

    xs, ys = hex_grid(size, spacing)
    dots = []
    for x, y in zip(xs.tolist(), ys.tolist()):
        cx = x + rng.uniform(-jitter, jitter) * spacing
        cy = y + rng.uniform(-jitter, jitter) * spacing
        r = base_radius * (1.0 + rng.uniform(-radius_variance, radius_variance))
        in_figure = plate.digit_mask[_mask_cell(cy, size, grid)][_mask_cell(cx, size, grid)]
        palette = plate.figure_palette if in_figure else plate.background_palette
        dots.append(GeneratedDot(cx, cy, r, palette[rng.randrange(len(palette))], in_figure))

    log.debug(f"Plate {plate.id}: {len(dots)} dots at {size:.0f}px")
    return tuple(dots)


def generate_plate_dots(plate_id: int, render_size_px: float,
                        catalogue: Optional[Dict[int, IshiharaPlate]] = None,
                        rng_factory: RandomFactory = LcgRandom) -> Tuple[GeneratedDot, ...]:
    """Look up a plate by id and generate its dots."""
    return generate_dots(get_plate(plate_id, catalogue), render_size_px, rng_factory)
