"""Runner which loads an SfM result and exports it as a Bundler list file and bundle file."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import hydra
from hydra.utils import instantiate
from omegaconf import OmegaConf

import bundler_export.utils.io as io_utils
import bundler_export.utils.logger as logger_utils
from bundler_export.bundler_exporter import BundlerExporter
from bundler_export.common.reconstruction import Reconstruction

logger = logger_utils.get_logger()


def positive_int(value: str) -> int:
    """Argparse type for strictly positive integers."""
    try:
        parsed = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value} is not an integer")
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return parsed


class BundlerExportRunner:
    tag = "Export an SfM reconstruction to the Bundler format"

    def __init__(self, override_args: Optional[List[str]] = None) -> None:
        argparser: argparse.ArgumentParser = self.construct_argparser()
        self.parsed_args: argparse.Namespace = argparser.parse_args(args=override_args)

        log_level = getattr(logging, self.parsed_args.log.upper(), None)
        if log_level is not None:
            logger.setLevel(log_level)

        self.exporter: BundlerExporter = self.construct_exporter()

    def construct_argparser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description=self.tag)

        parser.add_argument(
            "--bal_fpath",
            type=str,
            required=True,
            help="Path to a scene in the 'Bundle Adjustment in the Large' (BAL) format.",
        )
        parser.add_argument(
            "--images_dir",
            type=str,
            default=None,
            help="Optional directory with the png or jpg images of the scene. Sorted image names are used as view"
            " names, otherwise views are named `image_<i>`.",
        )
        parser.add_argument(
            "--output_root",
            type=str,
            required=True,
            help="Directory where the list file and the bundle file will be written.",
        )
        parser.add_argument(
            "--config_name",
            type=str,
            default="bundler_export.yaml",
            help="Exporter config, from among bundler_export/configs.",
        )
        parser.add_argument(
            "--min_track_length",
            type=positive_int,
            default=None,
            help="Override for the minimum number of views observing an exported track.",
        )
        parser.add_argument("--lists_fname", type=str, default=None, help="Override for the list file name.")
        parser.add_argument("--bundle_fname", type=str, default=None, help="Override for the bundle file name.")
        parser.add_argument(
            "-l",
            "--log",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            default="INFO",
            help="Set the logging level",
        )
        return parser

    def construct_exporter(self) -> BundlerExporter:
        """Construct the exporter from its config.

        All configs are relative to the bundler_export module.
        """
        overrides = []
        if self.parsed_args.min_track_length is not None:
            overrides.append(f"BundlerExporter.min_track_length={self.parsed_args.min_track_length}")
        if self.parsed_args.lists_fname is not None:
            overrides.append(f"BundlerExporter.lists_fname={self.parsed_args.lists_fname}")
        if self.parsed_args.bundle_fname is not None:
            overrides.append(f"BundlerExporter.bundle_fname={self.parsed_args.bundle_fname}")

        with hydra.initialize_config_module(config_module="bundler_export.configs", version_base=None):
            main_cfg = hydra.compose(config_name=self.parsed_args.config_name, overrides=overrides)
            logger.info("\n\nBundlerExporter config: " + OmegaConf.to_yaml(main_cfg))
            exporter: BundlerExporter = instantiate(main_cfg.BundlerExporter)

        return exporter

    def construct_reconstruction(self) -> Reconstruction:
        bal_fpath = Path(self.parsed_args.bal_fpath)
        if not bal_fpath.exists():
            raise FileNotFoundError(f"{bal_fpath} does not exist.")

        image_names = None
        if self.parsed_args.images_dir is not None:
            image_names = io_utils.get_sorted_image_names_in_dir(self.parsed_args.images_dir)

        reconstruction = Reconstruction.read_bal(str(bal_fpath), image_names)
        logger.info("Loaded %s from %s", reconstruction, bal_fpath)
        return reconstruction

    def run(self) -> bool:
        reconstruction = self.construct_reconstruction()
        success = self.exporter.export(reconstruction, self.parsed_args.output_root)
        if success:
            logger.info("Bundler files written to %s", self.parsed_args.output_root)
        else:
            logger.error("Bundler export to %s failed", self.parsed_args.output_root)
        return success


def main() -> None:
    runner = BundlerExportRunner()
    sys.exit(0 if runner.run() else 1)


if __name__ == "__main__":
    main()
