import numpy as np
import pytest

from bmpproc import FilterSpec, ParameterError, Raster, decode, load, save
from bmpproc.cli import build_argparser, main, parse_filter_tokens


def test_parse_filter_tokens_groups_params():
    specs = parse_filter_tokens(["-crop", "800", "600", "-gs"])
    assert specs == [FilterSpec("crop", ("800", "600")), FilterSpec("gs")]


def test_parse_filter_tokens_empty():
    assert parse_filter_tokens([]) == []


def test_parse_filter_tokens_requires_leading_dash():
    with pytest.raises(ParameterError, match="missing -"):
        parse_filter_tokens(["gs"])


def test_argparser_collects_filter_chain():
    args = build_argparser().parse_args(
        ["--seed", "3", "in.bmp", "out.bmp", "-crop", "10", "20", "-sharp", "-blur", "1.5"])
    assert (args.input, args.output, args.seed) == ("in.bmp", "out.bmp", 3)
    assert args.filters == ["-crop", "10", "20", "-sharp", "-blur", "1.5"]


def test_argparser_needs_both_paths():
    with pytest.raises(SystemExit):
        build_argparser().parse_args(["only.bmp"])


@pytest.fixture
def input_bmp(tmp_path, random_pixels):
    path = tmp_path / "in.bmp"
    px = random_pixels(5, 6)
    save(path, Raster(px))
    return path, px


def test_main_writes_filtered_image(tmp_path, input_bmp):
    src, px = input_bmp
    out = tmp_path / "out.bmp"
    assert main([str(src), str(out), "-crop", "4", "3", "-neg"]) == 0
    result = load(out).raster
    assert np.array_equal(result.pixels, 255 - px[:3, :4])


def test_main_without_filters_copies_pixels(tmp_path, input_bmp):
    src, px = input_bmp
    out = tmp_path / "copy.bmp"
    assert main([str(src), str(out)]) == 0
    assert np.array_equal(decode(out.read_bytes()).pixels, px)


def test_main_reports_unknown_filter(tmp_path, input_bmp, capsys):
    src, _ = input_bmp
    out = tmp_path / "out.bmp"
    assert main([str(src), str(out), "-gummy"]) == 1
    assert "gummy is not valid filter name" in capsys.readouterr().err
    assert not out.exists()


def test_main_reports_missing_input(tmp_path, capsys):
    missing = tmp_path / "nan.bmp"
    assert main([str(missing), str(tmp_path / "out.bmp"), "-gs"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("File processing error:")
    assert f"can not open for reading {missing}" in err


def test_main_reports_bad_format(tmp_path, capsys):
    bogus = tmp_path / "test.txt"
    bogus.write_text("hello, not a bitmap")
    assert main([str(bogus), str(tmp_path / "out.bmp")]) == 1
    assert "is not right BMP format" in capsys.readouterr().err


def test_main_seed_makes_shuffle_reproducible(tmp_path, input_bmp):
    src, _ = input_bmp
    a, b = tmp_path / "a.bmp", tmp_path / "b.bmp"
    assert main(["--seed", "9", str(src), str(a), "-shuffle", "4"]) == 0
    assert main(["--seed", "9", str(src), str(b), "-shuffle", "4"]) == 0
    assert a.read_bytes() == b.read_bytes()


def test_main_show_displays_input_and_result(tmp_path, input_bmp, monkeypatch):
    shown = []
    monkeypatch.setattr("bmpproc.cli.Visualizer.show_side_by_side",
                        lambda self, rasters, titles: shown.append((rasters, titles)))
    src, px = input_bmp
    assert main(["--show", str(src), str(tmp_path / "out.bmp"), "-neg"]) == 0
    (rasters, titles), = shown
    assert titles == ["Input", "Result"]
    assert np.array_equal(rasters[0].pixels, px)
    assert np.array_equal(rasters[1].pixels, 255 - px)


def test_main_show_without_filters_displays_input_only(tmp_path, input_bmp, monkeypatch):
    shown = []
    monkeypatch.setattr("bmpproc.cli.Visualizer.show_raster",
                        lambda self, raster, title: shown.append((raster, title)))
    monkeypatch.setattr("bmpproc.cli.Visualizer.show_side_by_side",
                        lambda self, rasters, titles: pytest.fail("nothing to compare"))
    src, px = input_bmp
    assert main(["--show", str(src), str(tmp_path / "out.bmp")]) == 0
    (raster, title), = shown
    assert title == "Input"
    assert np.array_equal(raster.pixels, px)


def test_main_reports_filter_errors_with_their_own_category(tmp_path, input_bmp, capsys):
    src, _ = input_bmp
    assert main([str(src), str(tmp_path / "out.bmp"), "-blur"]) == 1
    assert capsys.readouterr().err.strip() == "Filters processing error: wrong amount of params for filter blur"


def test_main_reports_console_errors(tmp_path, input_bmp, capsys):
    src, _ = input_bmp
    assert main([str(src), str(tmp_path / "out.bmp"), "gs"]) == 1
    assert capsys.readouterr().err.strip() == "Not valid console input: wrong filters input (missing -)"
