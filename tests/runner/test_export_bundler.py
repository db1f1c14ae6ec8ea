"""Integration tests for the Bundler export runner."""

import argparse
from pathlib import Path

import gtsam  # type: ignore
import pytest

import bundler_export.runner.export_bundler as export_bundler
from bundler_export.runner.export_bundler import BundlerExportRunner

GTSAM_EXAMPLE_FILE = "dubrovnik-3-7-pre"  # Example data with 3 cameras and 7 tracks.


def _expected_number_of_tracks(bal_fpath: str) -> int:
    sfm_data = gtsam.readBal(bal_fpath)
    return sum(1 for j in range(sfm_data.numberTracks()) if sfm_data.track(j).numberMeasurements() >= 2)


def test_export_bundler_runner(tmp_path: Path) -> None:
    bal_fpath = gtsam.findExampleDataFile(GTSAM_EXAMPLE_FILE)
    runner = BundlerExportRunner(override_args=["--bal_fpath", bal_fpath, "--output_root", str(tmp_path)])

    assert runner.run()

    assert (tmp_path / "list.txt").read_text().splitlines() == ["image_0", "image_1", "image_2"]
    bundle_lines = (tmp_path / "bundle.out").read_text().splitlines()
    assert bundle_lines[0] == "# Bundle file v0.3"
    assert bundle_lines[1] == f"3 {_expected_number_of_tracks(bal_fpath)}"


def test_export_bundler_runner_with_overrides(tmp_path: Path) -> None:
    images_dir = tmp_path / "images"
    images_dir.mkdir()
    for fname in ["c.jpg", "a.jpg", "b.jpg"]:
        (images_dir / fname).touch()
    output_root = tmp_path / "bundler"

    runner = BundlerExportRunner(
        override_args=[
            "--bal_fpath",
            gtsam.findExampleDataFile(GTSAM_EXAMPLE_FILE),
            "--images_dir",
            str(images_dir),
            "--output_root",
            str(output_root),
            "--lists_fname",
            "images.txt",
            "--min_track_length",
            "4",
            "-l",
            "WARNING",
        ]
    )

    assert runner.run()

    assert (output_root / "images.txt").read_text().splitlines() == ["a.jpg", "b.jpg", "c.jpg"]
    # No track can be seen by 4 of the 3 cameras.
    bundle_lines = (output_root / "bundle.out").read_text().splitlines()
    assert bundle_lines[1] == "3 0"
    assert len(bundle_lines) == 2 + 3 * 5


def test_export_bundler_runner_missing_input(tmp_path: Path) -> None:
    runner = BundlerExportRunner(
        override_args=["--bal_fpath", str(tmp_path / "missing.bal"), "--output_root", str(tmp_path)]
    )
    with pytest.raises(FileNotFoundError):
        runner.run()


def test_main_exits_with_zero_on_success(tmp_path: Path, monkeypatch) -> None:
    bal_fpath = gtsam.findExampleDataFile(GTSAM_EXAMPLE_FILE)
    monkeypatch.setattr("sys.argv", ["export_bundler", "--bal_fpath", bal_fpath, "--output_root", str(tmp_path)])

    with pytest.raises(SystemExit) as exit_info:
        export_bundler.main()

    assert exit_info.value.code == 0
    assert (tmp_path / "bundle.out").exists()


def test_main_exits_with_one_on_failed_export(tmp_path: Path, monkeypatch) -> None:
    """An output root which is an existing file cannot hold the exported files."""
    output_root = tmp_path / "not_a_dir"
    output_root.write_text("")
    bal_fpath = gtsam.findExampleDataFile(GTSAM_EXAMPLE_FILE)
    monkeypatch.setattr("sys.argv", ["export_bundler", "--bal_fpath", bal_fpath, "--output_root", str(output_root)])

    with pytest.raises(SystemExit) as exit_info:
        export_bundler.main()

    assert exit_info.value.code == 1


@pytest.mark.parametrize("min_track_length", ["0", "-3", "two"])
def test_invalid_min_track_length_is_a_usage_error(tmp_path: Path, min_track_length: str) -> None:
    with pytest.raises(SystemExit) as exit_info:
        BundlerExportRunner(
            override_args=[
                "--bal_fpath",
                gtsam.findExampleDataFile(GTSAM_EXAMPLE_FILE),
                "--output_root",
                str(tmp_path),
                "--min_track_length",
                min_track_length,
            ]
        )

    assert exit_info.value.code == 2


def test_positive_int() -> None:
    assert export_bundler.positive_int("3") == 3
    with pytest.raises(argparse.ArgumentTypeError):
        export_bundler.positive_int("0")
