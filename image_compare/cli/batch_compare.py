import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, List
from dotenv import load_dotenv
from ..errors import DecodeError
from ..services.difference_service import DifferenceService
from ..services.image_service import ImageService
from ..services.mask_service import MaskService

# Load environment variables first
load_dotenv()

logger = logging.getLogger("image_compare.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-compare",
        description="Compare images against a reference by average hot-spot colour.",
    )
    parser.add_argument("reference", type=Path, help="reference image")
    parser.add_argument("targets", type=Path, nargs="+", help="image files or directories to check")
    parser.add_argument("--tolerance", type=float,
                        default=float(os.getenv("COMPARE_TOLERANCE", "20")),
                        help="allowed divergence in percent (default: %(default)s)")
    parser.add_argument("--diff-dir", type=Path, default=None,
                        help="write each target minus the reference here, named by hash")
    parser.add_argument("--mask-tolerance", type=float,
                        default=float(os.getenv("SUBTRACT_TOLERANCE", "0")),
                        help="colour tolerance in percent for --diff-dir (default: %(default)s)")
    parser.add_argument("--recursive", action="store_true", help="descend into sub-directories")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _expand_targets(image_service: ImageService, targets: List[Path], recursive: bool) -> Iterator[Path]:
    for target in targets:
        if target.is_dir():
            yield from image_service.gallery_paths(target, recursive=recursive)
        else:
            yield target


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    image_service = ImageService()
    difference_service = DifferenceService(image_service)
    mask_service = MaskService(image_service)

    try:
        reference = image_service.load(args.reference)
    except (FileNotFoundError, DecodeError, TimeoutError) as err:
        logger.error(f"Cannot load reference: {err}")
        return 2

    checked = mismatched = 0
    with reference:
        for path in _expand_targets(image_service, args.targets, args.recursive):
            checked += 1
            try:
                target = image_service.load(path)
            except (FileNotFoundError, DecodeError, TimeoutError) as err:
                logger.warning(f"{path}: {err}")
                mismatched += 1
                continue

            with target:
                score = difference_service.difference(reference, target)
                matches = difference_service.is_match(score, args.tolerance)
                logger.info(f"{path}: score={score:.4f} {'MATCH' if matches else 'DIFFERENT'}")
                if not matches:
                    mismatched += 1
                if args.diff_dir is not None:
                    with mask_service.subtract(target, reference, args.mask_tolerance) as diff:
                        written = image_service.save(diff, directory=args.diff_dir)
                    logger.info(f"{path}: diff written to {written}")

    logger.info(f"Checked {checked} image(s), {mismatched} mismatch(es)")
    return 1 if mismatched or not checked else 0


if __name__ == "__main__":
    sys.exit(main())
