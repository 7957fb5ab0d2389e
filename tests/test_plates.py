import pytest

from visioncheck.errors import ChartError, UnknownPlateError
from visioncheck.services.plates import (
    CATALOGUE,
    MASK_GRID,
    NO_NUMBER,
    PLATES,
    PlateCategory,
    build_catalogue,
    compose_digit_mask,
    get_plate,
)


def test_mask_is_square_and_centred():
    mask = compose_digit_mask("8")
    assert len(mask) == MASK_GRID
    assert all(len(row) == MASK_GRID for row in mask)
    # border rows and columns stay background
    assert not any(mask[0]) and not any(mask[-1])
    assert not any(row[0] or row[-1] for row in mask)
    assert any(mask[MASK_GRID // 2])


def test_two_digit_mask_fits():
    mask = compose_digit_mask("74")
    assert sum(cell for row in mask for cell in row) > sum(cell for row in compose_digit_mask("1") for cell in row)


@pytest.mark.parametrize("text", ["", "A", "123"])
def test_mask_rejects_unrenderable_text(text):
    with pytest.raises(ChartError):
        compose_digit_mask(text)


def test_catalogue_contents():
    assert len(CATALOGUE) == len(PLATES) == 13
    assert get_plate(1).category is PlateCategory.DEMONSTRATION
    assert get_plate(10).alternate_answer == "2"
    assert all(p.alternate_answer == NO_NUMBER for p in PLATES if p.category is PlateCategory.TRITAN_SCREENING)


def test_unknown_plate():
    with pytest.raises(UnknownPlateError):
        get_plate(99)
    with pytest.raises(KeyError):
        get_plate(0)


def test_duplicate_ids_rejected():
    with pytest.raises(ChartError):
        build_catalogue([PLATES[0], PLATES[0]])
