"""Exports the estimated part of a reconstruction in the Bundler format."""

import os
from pathlib import Path
from typing import Union

import bundler_export.utils.io as io_utils
import bundler_export.utils.logger as logger_utils
from bundler_export.common.reconstruction import MIN_TRACK_LENGTH, Reconstruction

logger = logger_utils.get_logger()


class BundlerExporter:
    """Writes a list file and a bundle file into an output directory."""

    def __init__(
        self,
        min_track_length: int = MIN_TRACK_LENGTH,
        lists_fname: str = "list.txt",
        bundle_fname: str = "bundle.out",
    ) -> None:
        """Initializes the exporter.

        Args:
            min_track_length: minimum number of views observing an exported track.
            lists_fname: file name of the list file, relative to the output directory.
            bundle_fname: file name of the bundle file, relative to the output directory.
        """
        if min_track_length < 1:
            raise ValueError(f"min_track_length must be positive, got {min_track_length}")
        self._min_track_length = min_track_length
        self._lists_fname = lists_fname
        self._bundle_fname = bundle_fname

    def __repr__(self) -> str:
        return (
            f"BundlerExporter(min_track_length={self._min_track_length}, "
            f"lists_fname={self._lists_fname}, bundle_fname={self._bundle_fname})"
        )

    def lists_path(self, output_dir: Union[str, Path]) -> Path:
        return Path(output_dir) / self._lists_fname

    def bundle_path(self, output_dir: Union[str, Path]) -> Path:
        return Path(output_dir) / self._bundle_fname

    def export(self, reconstruction: Reconstruction, output_dir: Union[str, Path]) -> bool:
        """Writes both Bundler files into `output_dir`, creating the directory if needed.

        Returns:
            True if both files were written successfully.
        """
        try:
            os.makedirs(output_dir, exist_ok=True)
        except OSError:
            logger.exception("Cannot create the output directory: %s", output_dir)
            return False

        logger.info("Exporting %s to %s", reconstruction, output_dir)
        return io_utils.write_bundler_files(
            reconstruction,
            self.lists_path(output_dir),
            self.bundle_path(output_dir),
            min_track_length=self._min_track_length,
        )
