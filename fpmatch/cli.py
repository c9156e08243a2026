"""
Command-line interface for fingerprint minutiae matching.

Subcommands:
    thin     Skeletonize a fingerprint image
    extract  Extract the minutiae signature of a fingerprint image
    match    Decide whether two fingerprints (images or signatures) match
    config   Print the effective configuration as YAML
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from fpmatch.minutiae.minutiae_extraction import Minutia, MinutiaeExtractor
from fpmatch.minutiae.minutiae_matching import MinutiaeMatcher, match
from fpmatch.minutiae.thinning import SkeletonSnapshots, skeletonize
from fpmatch.utils.config import Config, load_config
from fpmatch.utils.io import (
    is_image_path,
    load_binary_image,
    load_signature,
    save_image,
    save_signature,
)
from fpmatch.utils.logger import setup_logger
from fpmatch.utils.visualization import draw_minutiae

logger = logging.getLogger("fpmatch.cli")


def _skeleton_from_image(path: str, config: Config, method: str, collector=None):
    grid = load_binary_image(path, method)
    logger.info(f"Loaded {path} ({grid.shape[0]}x{grid.shape[1]}, {int(grid.sum())} ridge pixels)")
    return skeletonize(
        grid,
        collector=collector,
        max_iterations=config.extraction.max_thinning_iterations
    )


def _signature_from_path(path: str, config: Config, method: str) -> List[Minutia]:
    if not is_image_path(path):
        return load_signature(path)

    skeleton = _skeleton_from_image(path, config, method)
    return MinutiaeExtractor(config.extraction).extract(skeleton)


def cmd_thin(args, config: Config) -> int:
    collector = SkeletonSnapshots() if args.debug_strip else None
    skeleton = _skeleton_from_image(args.image, config, args.binarization, collector)

    save_image(skeleton, args.output)
    logger.info(f"Skeleton saved to {args.output}")

    if collector is not None:
        save_image(collector.to_strip(), args.debug_strip)
        logger.info(f"Thinning steps ({len(collector)}) saved to {args.debug_strip}")

    return 0


def cmd_extract(args, config: Config) -> int:
    skeleton = _skeleton_from_image(args.image, config, args.binarization)
    minutiae = MinutiaeExtractor(config.extraction).extract(skeleton)

    save_signature(minutiae, args.output)
    logger.info(f"{len(minutiae)} minutiae saved to {args.output}")

    if args.overlay:
        save_image(draw_minutiae(skeleton, minutiae), args.overlay)
        logger.info(f"Minutiae overlay saved to {args.overlay}")

    return 0


def cmd_match(args, config: Config) -> int:
    minutiae1 = _signature_from_path(args.first, config, args.binarization)
    minutiae2 = _signature_from_path(args.second, config, args.binarization)
    logger.info(f"Signatures: {len(minutiae1)} and {len(minutiae2)} minutiae")

    if args.score or args.json:
        result = MinutiaeMatcher(config.matching).match(minutiae1, minutiae2)
        matched = result.matched
        if args.json:
            print(json.dumps(result.to_dict(), indent=2))
            return 0 if matched else 1
        print(f"score: {result.score:.4f} (overlap {result.details.get('count', 0)})")
    else:
        matched = match(minutiae1, minutiae2, config.matching)

    print("MATCH" if matched else "NO MATCH")
    return 0 if matched else 1


def cmd_config(args, config: Config) -> int:
    print(yaml.safe_dump(config.to_dict(), default_flow_style=False, sort_keys=False), end="")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpmatch",
        description="Fingerprint minutiae extraction and matching"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML configuration file"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured logging level"
    )
    parser.add_argument(
        "--binarization",
        type=str,
        default="otsu",
        choices=["global", "otsu", "adaptive"],
        help="Binarization method for image inputs"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    thin = subparsers.add_parser("thin", help="Skeletonize a fingerprint image")
    thin.add_argument("image", help="Input fingerprint image")
    thin.add_argument("-o", "--output", required=True, help="Output skeleton image")
    thin.add_argument(
        "--debug-strip",
        default=None,
        help="Write every thinning sub-step side by side to this image"
    )
    thin.set_defaults(func=cmd_thin)

    extract = subparsers.add_parser("extract", help="Extract minutiae from an image")
    extract.add_argument("image", help="Input fingerprint image")
    extract.add_argument("-o", "--output", required=True, help="Output signature (JSON)")
    extract.add_argument("--overlay", default=None, help="Write annotated minutiae image")
    extract.set_defaults(func=cmd_extract)

    match_cmd = subparsers.add_parser("match", help="Match two fingerprints")
    match_cmd.add_argument("first", help="Image or signature JSON")
    match_cmd.add_argument("second", help="Image or signature JSON")
    match_cmd.add_argument(
        "--score",
        action="store_true",
        help="Search the best alignment and report its score"
    )
    match_cmd.add_argument(
        "--json",
        action="store_true",
        help="Print the best alignment result as JSON"
    )
    match_cmd.set_defaults(func=cmd_match)

    config_cmd = subparsers.add_parser("config", help="Print the effective configuration")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config) if args.config else Config()

    setup_logger(
        "fpmatch",
        level=args.log_level or config.logging.level,
        log_dir=Path(config.logging.log_dir) if config.logging.file_output else None
    )

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
