"""
Pseudoisochromatic Plate Catalogue

Static plate definitions: the digit each plate hides, the answer a deficient
observer is expected to give, the category that decides how an error is
scored, and the two palettes the dot generator draws from.

Digit masks are square boolean grids composed from a 5x7 bitmap font, with
the glyphs centred so that they fall well inside the circular plate.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from ..errors import ChartError, UnknownPlateError

Mask = Tuple[Tuple[bool, ...], ...]

MASK_GRID = 15
NO_NUMBER = "none"

_GLYPHS: Dict[str, Tuple[str, ...]] = {
    "0": ("01110", "10001", "10011", "10101", "11001", "10001", "01110"),
    "1": ("00100", "01100", "00100", "00100", "00100", "00100", "01110"),
    "2": ("01110", "10001", "00001", "00010", "00100", "01000", "11111"),
    "3": ("11110", "00001", "00001", "01110", "00001", "00001", "11110"),
    "4": ("00010", "00110", "01010", "10010", "11111", "00010", "00010"),
    "5": ("11111", "10000", "11110", "00001", "00001", "10001", "01110"),
    "6": ("00110", "01000", "10000", "11110", "10001", "10001", "01110"),
    "7": ("11111", "00001", "00010", "00100", "01000", "01000", "01000"),
    "8": ("01110", "10001", "10001", "01110", "10001", "10001", "01110"),
    "9": ("01110", "10001", "10001", "01111", "00001", "00010", "01100"),
}
GLYPH_W, GLYPH_H = 5, 7


class PlateCategory(str, Enum):
    DEMONSTRATION = "demonstration"
    TRANSFORMATION = "transformation"
    VANISHING = "vanishing"
    DIAGNOSTIC_AXIS = "diagnostic_axis"
    TRITAN_SCREENING = "tritan_screening"


SCREENING_CATEGORIES = frozenset({PlateCategory.TRANSFORMATION, PlateCategory.VANISHING})


@dataclass(frozen=True)
class IshiharaPlate:
    id: int
    correct_answer: str
    alternate_answer: Optional[str]
    category: PlateCategory
    figure_palette: Tuple[str, ...]
    background_palette: Tuple[str, ...]
    digit_mask: Mask

    @property
    def grid_size(self) -> int:
        return len(self.digit_mask)


def compose_digit_mask(text: str, grid_size: int = MASK_GRID) -> Mask:
    """Render digits into a centred square boolean grid."""
    if not text or any(ch not in _GLYPHS for ch in text):
        raise ChartError(f"cannot compose a digit mask for {text!r}")
    width = len(text) * GLYPH_W + (len(text) - 1)
    if width > grid_size or GLYPH_H > grid_size:
        raise ChartError(f"{text!r} does not fit a {grid_size}x{grid_size} mask")

    rows = [[False] * grid_size for _ in range(grid_size)]
    left = (grid_size - width) // 2
    top = (grid_size - GLYPH_H) // 2
    for k, ch in enumerate(text):
        x0 = left + k * (GLYPH_W + 1)
        for gy, line in enumerate(_GLYPHS[ch]):
            for gx, bit in enumerate(line):
                if bit == "1":
                    rows[top + gy][x0 + gx] = True
    return tuple(tuple(r) for r in rows)


# Palettes. Red-green figure and ground are matched in lightness so that only
# hue separates them.
DEMO_FIGURE = ("#d2452f", "#c93b2a", "#e0553a", "#cc4a36")
DEMO_GROUND = ("#9a9a9a", "#a8a8a8", "#8e8e8e", "#b0b0b0")
RG_FIGURE = ("#d9763b", "#e08a4a", "#c9663a", "#e3a15a", "#cf5f3f")
RG_GROUND = ("#8fa64b", "#9cb35a", "#7f9a48", "#a8b866", "#b3b45e")
VANISH_FIGURE = ("#c98a5a", "#d49a62", "#bf7f55", "#cf9158")
VANISH_GROUND = ("#9a9c5c", "#a6a566", "#8f9455", "#b0aa6a")
AXIS_FIGURE = ("#b05a8c", "#c0607a", "#a5568f", "#c46a70")
AXIS_GROUND = ("#8e9a8a", "#9aa592", "#848f80", "#a3ab98")
TRITAN_FIGURE = ("#7f8fc9", "#6f7fc0", "#8c97d1", "#7886c4")
TRITAN_GROUND = ("#c9c56a", "#d6cf7a", "#bdbb62", "#cfc872")


def _plate(id: int, answer: str, alternate: Optional[str], category: PlateCategory,
           figure: Tuple[str, ...], ground: Tuple[str, ...]) -> IshiharaPlate:
    return IshiharaPlate(id, answer, alternate, category, figure, ground, compose_digit_mask(answer))


PLATES: Tuple[IshiharaPlate, ...] = (
    _plate(1, "12", None, PlateCategory.DEMONSTRATION, DEMO_FIGURE, DEMO_GROUND),
    _plate(2, "8", "3", PlateCategory.TRANSFORMATION, RG_FIGURE, RG_GROUND),
    _plate(3, "6", "5", PlateCategory.TRANSFORMATION, RG_FIGURE, RG_GROUND),
    _plate(4, "29", "70", PlateCategory.TRANSFORMATION, RG_FIGURE, RG_GROUND),
    _plate(5, "74", "21", PlateCategory.TRANSFORMATION, RG_FIGURE, RG_GROUND),
    _plate(6, "5", NO_NUMBER, PlateCategory.VANISHING, VANISH_FIGURE, VANISH_GROUND),
    _plate(7, "3", NO_NUMBER, PlateCategory.VANISHING, VANISH_FIGURE, VANISH_GROUND),
    _plate(8, "15", NO_NUMBER, PlateCategory.VANISHING, VANISH_FIGURE, VANISH_GROUND),
    _plate(9, "45", NO_NUMBER, PlateCategory.VANISHING, VANISH_FIGURE, VANISH_GROUND),
    # Protans read only the 2, deutans only the 4
    _plate(10, "42", "2", PlateCategory.DIAGNOSTIC_AXIS, AXIS_FIGURE, AXIS_GROUND),
    _plate(11, "9", NO_NUMBER, PlateCategory.TRITAN_SCREENING, TRITAN_FIGURE, TRITAN_GROUND),
    _plate(12, "6", NO_NUMBER, PlateCategory.TRITAN_SCREENING, TRITAN_FIGURE, TRITAN_GROUND),
    _plate(13, "31", NO_NUMBER, PlateCategory.TRITAN_SCREENING, TRITAN_FIGURE, TRITAN_GROUND),
)


def build_catalogue(plates: Sequence[IshiharaPlate]) -> Dict[int, IshiharaPlate]:
    catalogue: Dict[int, IshiharaPlate] = {}
    for plate in plates:
        if plate.id in catalogue:
            raise ChartError(f"duplicate plate id {plate.id}")
        catalogue[plate.id] = plate
    return catalogue


CATALOGUE: Dict[int, IshiharaPlate] = build_catalogue(PLATES)


def get_plate(plate_id: int, catalogue: Optional[Dict[int, IshiharaPlate]] = None) -> IshiharaPlate:
    catalogue = CATALOGUE if catalogue is None else catalogue
    try:
        return catalogue[plate_id]
    except KeyError:
        raise UnknownPlateError(f"plate {plate_id!r} is not in the catalogue") from None
