import pytest

from rowlink.geometry import ClickTarget, GridGeometry


def full_hd() -> GridGeometry:
    return GridGeometry(screen_width=1920, screen_height=1080)


def test_cell_size_divides_screen_by_grid() -> None:
    cell_w, cell_h = full_hd().cell_size
    assert cell_w == pytest.approx(73.846, abs=1e-3)
    assert cell_h == pytest.approx(41.538, abs=1e-3)


def test_precision_target_for_ab_then_d() -> None:
    geo = full_hd()
    cell_w, cell_h = 1920 / 26, 1080 / 26
    sub_w, sub_h = (cell_w - 8) / 8, (cell_h - 8) / 3

    target = geo.precision_target(0, 1, 1, 2)

    assert target.x == pytest.approx(cell_w + 4 + 2 * sub_w + sub_w / 2)
    assert target.y == pytest.approx(4 + sub_h + sub_h / 2)
    assert target.y == pytest.approx(20.77, abs=0.01)
    assert target.rounded() == (98, 21)


def test_precision_target_is_center_of_rendered_subcell() -> None:
    geo = full_hd()
    for sub_row in range(3):
        for sub_col in range(8):
            rect = geo.subcell_rect(12, 20, sub_row, sub_col)
            target = geo.precision_target(12, 20, sub_row, sub_col)
            assert target == (rect.x + rect.width / 2, rect.y + rect.height / 2)


def test_subgrid_stays_inside_padded_cell() -> None:
    geo = full_hd()
    cell = geo.cell_rect(25, 25)
    first = geo.subcell_rect(25, 25, 0, 0)
    last = geo.subcell_rect(25, 25, 2, 7)
    assert first.x == pytest.approx(cell.x + 4)
    assert first.y == pytest.approx(cell.y + 4)
    assert last.x + last.width == pytest.approx(cell.x + cell.width - 4)
    assert last.y + last.height == pytest.approx(cell.y + cell.height - 4)


def test_cell_and_screen_centers() -> None:
    geo = full_hd()
    assert geo.screen_center() == (960, 540)
    center = geo.cell_center(2, 3)
    assert center.x == pytest.approx(3.5 * 1920 / 26)
    assert center.y == pytest.approx(2.5 * 1080 / 26)


def test_rounding_is_half_up() -> None:
    assert ClickTarget(94.5, 20.5).rounded() == (95, 21)
    assert ClickTarget(94.49, 20.51).rounded() == (94, 21)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"screen_width": 0, "screen_height": 1080},
        {"screen_width": 1920, "screen_height": 1080, "grid_size": 27},
        {"screen_width": 1920, "screen_height": 1080, "sub_cols": 0},
    ],
)
def test_invalid_geometry_rejected(kwargs) -> None:
    with pytest.raises(ValueError):
        GridGeometry(**kwargs)
