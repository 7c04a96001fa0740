import os

import pytest

from pivkit.output import HEADER, Output, OutputFormat
from pivkit.pivdata import PivData, PivPointData


def _sample_data(name="frames/frame001.tif"):
    points = [
        PivPointData(x=16.0, y=16.0, u=1.5, v=-0.25, snr=4.0, intensity=120.0),
        PivPointData(x=32.0, y=16.0, u=-2.0, v=0.5, snr=3.5, intensity=90.0),
        PivPointData(x=16.0, y=32.0, u=0.75, v=1.25, snr=2.0, filtered=True, intensity=80.0),
        PivPointData(x=32.0, y=32.0, u=3.0, v=-1.0, snr=5.0, intensity=60.0),
    ]
    data = PivData()
    data.set_list(points)
    data.set_name(name)
    return data, points


def test_output_path_adds_separator():
    out = Output("results", 100)
    assert out.output_path("frame001") == "results/frame001.txt"


def test_output_path_keeps_existing_separator():
    out = Output("results/", 100)
    assert out.output_path("frame001") == "results/frame001.txt"


def test_output_path_uses_base_name():
    out = Output("results", 100)
    assert out.output_path("some/dir/frame7") == "results/frame7.txt"


def test_format_valid_point():
    out = Output("results", 100)
    point = PivPointData(x=16, y=10, u=1.5, v=2.0, snr=3, valid=True, intensity=100)
    assert out.format_point(point) == (
        "        16\t        90\t       1.5\t        -2\t         3\t1\t0\t       100"
    )


def test_format_invalid_point_zeroes_values():
    out = Output("results", 50)
    point = PivPointData(x=8, y=5, u=7.0, v=3.0, snr=9.0, valid=False, filtered=True, intensity=44.0)
    columns = out.format_point(point).split("\t")
    assert len(columns) == 8
    assert [float(c) for c in columns[2:5]] == [0.0, 0.0, 0.0]
    assert columns[5] == "0"
    assert columns[6] == "1"
    assert float(columns[7]) == 0.0
    assert float(columns[1]) == 50 - 5


def test_numbers_are_right_aligned_to_width_ten():
    out = Output("results", 100)
    point = PivPointData(x=1, y=2, u=3, v=4, snr=5, valid=True, intensity=6)
    columns = out.format_point(point).split("\t")
    for column in columns[:5] + columns[7:]:
        assert len(column) == 10
        assert column == column.strip().rjust(10)


def test_write_header_and_line_count(tmp_path):
    data, points = _sample_data()
    out = Output(tmp_path, 256)
    path = out.write(data)
    assert os.path.basename(path) == "frame001.txt"
    with open(path, encoding="utf-8") as handle:
        lines = handle.readlines()
    assert lines[0] == HEADER
    assert len(lines) == 1 + len(points)


def test_write_read_round_trip(tmp_path):
    data, points = _sample_data()
    out = Output(tmp_path, 256)
    path = out.write(data)

    loaded = PivData()
    loaded.read(3, path, 256)
    assert loaded.index == 3
    assert (loaded.width, loaded.height) == (data.width, data.height)
    for i in range(data.height):
        for j in range(data.width):
            original = data.data(i, j)
            back = loaded.data(i, j)
            assert back.x == pytest.approx(original.x)
            assert back.y == pytest.approx(original.y)
            assert back.u == pytest.approx(original.u)
            assert back.v == pytest.approx(original.v)
            assert back.snr == pytest.approx(original.snr)
            assert back.filtered == original.filtered
            assert back.intensity == pytest.approx(original.intensity)


def test_output_current_text_writes_file(tmp_path):
    data, _ = _sample_data()
    out = Output(tmp_path, 256, OutputFormat.TEXT)
    path = out.output_current(data)
    assert path == out.output_path(data.name)
    assert os.path.exists(path)


def test_output_current_hdf5_writes_nothing(tmp_path):
    data, _ = _sample_data()
    out = Output(tmp_path, 256, OutputFormat.HDF5)
    assert out.output_current(data) is None
    assert list(tmp_path.iterdir()) == []


def test_write_to_missing_folder_raises(tmp_path):
    data, _ = _sample_data()
    out = Output(tmp_path / "missing", 256)
    with pytest.raises(OSError):
        out.write(data)