"""Command line entry point for landmark fitting."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core.config import (
    DEFAULT_THRESHOLD,
    DEFAULT_WINDOW_TITLE,
    Configuration,
    Mode,
    load_display_settings,
    marker_from_settings,
)
from .errors import ConfigurationError
from .orchestrator import RunOutcome, run
from .utils.paths import CONFIGS_DIR, default_model_pathname, default_params_pathname

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CANCELLED = 1
EXIT_FAILURE = 2

MODES_HELP = """\
Default mode:
  Fit the image at <image-argument> and save the landmarks to
  [landmarks-argument] if given, otherwise display the result.

List mode:
  Fit every image pathname listed in <image-argument>. If
  [landmarks-argument] is given it must be a list of the same length
  holding the pathnames the landmarks are written to.

Video mode:
  Fit the frames of the video at <image-argument>. If [landmarks-argument]
  is given it is a printf-style template taking one unsigned integer, the
  1-based frame number (e.g. out/frame-%05d.pts). Without it the tracking
  is displayed on screen.
"""


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="face-fit",
        usage="%(prog)s [options] <image-argument> [landmarks-argument]",
        description="Fit facial landmarks to an image, a list of images or a video.",
        epilog=MODES_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("image_argument", nargs="?", help="Image, list file or video to process")
    parser.add_argument("landmarks_argument", nargs="?", help="Landmark pathname, list or template")
    parser.add_argument("-h", "--help", action="store_true", help="This helpful message.")
    parser.add_argument("--lists", action="store_true", help="Switch to list processing mode.")
    parser.add_argument("--video", action="store_true", help="Switch to video processing mode.")
    parser.add_argument(
        "--wait-time",
        type=float,
        default=None,
        help="Seconds to wait when displaying results. The default depends on the mode.",
    )
    parser.add_argument("--model", default=None, help="Pathname of the tracker model to use.")
    parser.add_argument("--params", default=None, help="Pathname of the tracker parameters to use.")
    parser.add_argument(
        "--threshold",
        type=int,
        default=DEFAULT_THRESHOLD,
        help="Fit confidence threshold, 0 to 10 where 10 is extremely picky. Default %(default)s.",
    )
    parser.add_argument("--title", default=None, help="The window title to use.")
    parser.add_argument("--verbose", action="store_true", help="Display information whilst processing.")
    parser.add_argument(
        "--config",
        default=str(CONFIGS_DIR / "default.yaml"),
        help="YAML file with display settings.",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_parser()
    args, unknown = parser.parse_known_intermixed_args(argv)
    if unknown:
        raise ConfigurationError(f"Unable to process argument '{unknown[0]}'")
    return args


def select_mode(args: argparse.Namespace) -> Mode:
    if args.lists and args.video:
        raise ConfigurationError(
            "The operator is confused as the switches --lists and --video are present on the command line."
        )
    if args.lists:
        return Mode.LISTS
    if args.video:
        return Mode.VIDEO
    return Mode.IMAGE


def build_configuration(args: argparse.Namespace, mode: Mode) -> Configuration:
    display = load_display_settings(args.config)
    title = args.title or display.get("window_title") or DEFAULT_WINDOW_TITLE
    config = Configuration(
        model_pathname=Path(args.model) if args.model else default_model_pathname(),
        params_pathname=Path(args.params) if args.params else default_params_pathname(),
        threshold=args.threshold,
        window_title=str(title),
        verbose=args.verbose,
        marker=marker_from_settings(display),
    )
    return config.for_mode(mode, args.wait_time)


def run_program(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.help or not args.image_argument:
        build_parser().print_help()
        return EXIT_OK

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    mode = select_mode(args)
    config = build_configuration(args, mode)
    logger.info("Mode: %s | threshold: %d | wait time: %.3fs", mode.value, config.threshold, config.wait_time)

    summary = run(config, mode, args.image_argument, args.landmarks_argument)
    if summary.outcome is RunOutcome.CANCELLED:
        print("Stopping prematurely.")
        return EXIT_CANCELLED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return run_program(argv)
    except Exception as exc:  # every failure maps to one exit status
        print(f"Caught unhandled exception: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
