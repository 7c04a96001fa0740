import pytest

from pivkit.pivdata import PivData, PivPointData


def _points():
    return [
        PivPointData(x=32.0, y=16.0, u=1.0, v=2.0, snr=3.0, intensity=50.0),
        PivPointData(x=16.0, y=16.0, u=-1.0, v=0.5, snr=1.5, filtered=True, intensity=20.0),
        PivPointData(x=16.0, y=32.0, u=4.0, v=-3.0, snr=7.0, intensity=80.0),
    ]


def test_zero_point():
    z = PivPointData.zero()
    assert (z.x, z.y, z.u, z.v, z.snr, z.intensity) == (0.0,) * 6
    assert z.valid is False and z.filtered is False


def test_empty_constructor_is_empty():
    data = PivData()
    assert data.is_empty()
    assert data.index == -2
    assert data.num_valid() == 0
    assert data.min() == PivPointData.zero()


def test_sized_constructor_zeroed():
    data = PivData(3, 2)
    assert not data.is_empty()
    assert (data.width, data.height) == (3, 2)
    assert data.num_valid() == 0
    assert data.data(1, 2) == PivPointData.zero()


def test_set_list_sorts_grid():
    data = PivData()
    data.set_list(_points())
    assert (data.width, data.height) == (2, 2)
    assert [data.data(0, j).x for j in range(2)] == [16.0, 32.0]
    assert [data.data(i, 0).y for i in range(2)] == [16.0, 32.0]
    assert data.data(0, 1).u == 1.0
    assert data.points == _points()


def test_missing_cell_is_invalid_with_position():
    data = PivData()
    data.set_list(_points())
    cell = data.data(1, 1)
    assert cell.valid is False
    assert (cell.x, cell.y) == (32.0, 32.0)
    assert cell.u == 0.0
    assert data.num_valid() == 3
    assert data.is_valid(0, 0)
    assert not data.is_valid(1, 1)


def test_out_of_range_returns_zero():
    data = PivData()
    data.set_list(_points())
    assert data.data(-1, 0) == PivPointData.zero()
    assert data.data(0, 5) == PivPointData.zero()
    assert data.is_valid(5, 5) is False
    assert data.filtered(-1, 0) is False


def test_filter_flags():
    data = PivData()
    data.set_list(_points())
    assert data.filtered(0, 0)
    assert not data.filtered(0, 1)
    data.set_filter(0, 1, True)
    assert data.filtered(0, 1)
    data.set_filter(0, 0, False)
    assert not data.filtered(0, 0)


def test_set_data_and_bounds():
    data = PivData(2, 2)
    point = PivPointData(x=5.0, y=6.0, u=7.0, valid=True)
    data.set_data(1, 0, point)
    assert data.data(1, 0) == point
    data.set_data(9, 9, point)
    assert data.num_valid() == 1


def test_min_max():
    data = PivData()
    data.set_list(_points())
    low, high = data.min(), data.max()
    assert low.u == -1.0 and high.u == 4.0
    assert low.v == -3.0 and high.v == 2.0
    assert low.x == 16.0 and high.y == 32.0
    assert low.valid and high.valid
    assert all(getattr(low, f) <= getattr(high, f) for f in ("x", "y", "u", "v", "snr", "intensity"))


def test_min_max_follow_changes():
    data = PivData()
    data.set_list(_points())
    assert data.max().u == 4.0
    data.set_data(0, 0, PivPointData(x=16.0, y=16.0, u=9.0, valid=True))
    assert data.max().u == 9.0


def test_clear():
    data = PivData()
    data.set_list(_points())
    data.clear()
    assert data.is_empty()
    assert data.data(0, 0) == PivPointData.zero()


@pytest.mark.parametrize(
    "filename, expected",
    [("frame_a.tif", "frame_a"), ("dir/img.01.tiff", "dir/img.01"), ("noext", "")],
)
def test_set_name(filename, expected):
    data = PivData()
    data.set_name(filename)
    assert data.name == expected


def test_read(tmp_path):
    path = tmp_path / "frame.txt"
    path.write_text(
        "x, y, u, v, snr, valid, filtered, intensity\n"
        "        16\t        84\t       1.5\t        -2\t         3\t1\t0\t       100\n"
        "        32\t        84\t         0\t         0\t         0\t0\t1\t         0\n"
    )
    data = PivData()
    data.read(4, path, 100)
    assert data.index == 4
    assert (data.width, data.height) == (2, 1)
    first = data.data(0, 0)
    assert first.y == 16.0
    assert first.u == 1.5
    assert first.v == 2.0
    assert first.intensity == 100.0
    assert data.filtered(0, 1)
    assert data.num_valid() == 2


def test_read_missing_file(tmp_path):
    data = PivData()
    with pytest.raises(OSError):
        data.read(0, tmp_path / "absent.txt", 10)