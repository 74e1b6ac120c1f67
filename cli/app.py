"""
promplot command line: query Prometheus, plot the result, and save it to a file
and/or post it to a Slack channel.
"""

import argparse
import logging
import os
import platform
import sys
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

from dotenv import load_dotenv
load_dotenv(PROJECT_ROOT / ".env")

from api.errors import (
    FetchError,
    PromplotError,
    RenderError,
    SinkError,
    UnsupportedFormatError,
    ValueParseError,
)
from api.prometheus import DEFAULT_NUM_POINTS, get_metrics
from api.slack import upload_file
from cli import __version__
from cli.flags import parse_duration, parse_time
from delivery import STDOUT_PATH, write_file
from visualization import plot_to_bytes

logger = logging.getLogger(__name__)

DESCRIPTION = """\
Create and deliver plots from your Prometheus metrics.

Save plot to file or send it right to a slack channel.
At least one of --slack or --file must be set."""

_FAILURE_MESSAGES = (
    (FetchError, "failed getting metrics"),
    (ValueParseError, "failed creating plot"),
    (UnsupportedFormatError, "failed creating plot"),
    (RenderError, "failed creating plot"),
    (SinkError, "failed delivering plot"),
)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser; --url, --slack and --channel default to PROMPLOT_* environment variables."""
    parser = argparse.ArgumentParser(
        prog="promplot",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--silent", action="store_true", help="Optional. Suppress all output.")
    parser.add_argument("--version", action="store_true", help="Optional. Print binary version.")
    parser.add_argument(
        "--url",
        default=os.environ.get("PROMPLOT_URL", ""),
        help="Required. URL of Prometheus server (env PROMPLOT_URL).",
    )
    parser.add_argument("--query", default="", help="Required. PQL query.")
    parser.add_argument(
        "--time",
        dest="query_time",
        type=parse_time,
        default=None,
        help="Time for query (default is now). Format like the default format of the Unix date command, "
        "ISO 8601, or Unix seconds.",
    )
    parser.add_argument(
        "--range",
        dest="duration",
        type=parse_duration,
        default=None,
        help="Required. Time to look back to. Format: 5d12h34m56s",
    )
    parser.add_argument("--title", default="Prometheus metrics", help="Optional. Title of graph.")
    parser.add_argument(
        "--format",
        dest="fmt",
        default="png",
        help="Optional. Image format: eps, jpg, jpeg, pdf, png, svg, tif or tiff.",
    )
    parser.add_argument(
        "--file",
        default="",
        help="File to save image to. Should have same extension as specified --format. "
        "Set --file to - to write to stdout.",
    )
    parser.add_argument(
        "--slack",
        dest="slack_token",
        default=os.environ.get("PROMPLOT_SLACK_TOKEN", ""),
        help="Slack API token (env PROMPLOT_SLACK_TOKEN). Set to post plot to Slack.",
    )
    parser.add_argument(
        "--channel",
        default=os.environ.get("PROMPLOT_SLACK_CHANNEL", ""),
        help="Required when --slack is set. Slack channel to post to (env PROMPLOT_SLACK_CHANNEL).",
    )
    return parser


def _missing_required(args: argparse.Namespace) -> bool:
    """True when url/query/range is missing or there is nowhere to deliver the plot."""
    if not args.url or not args.query:
        return True
    if args.duration is None or args.duration.total_seconds() <= 0:
        return True
    if args.slack_token and not args.channel:
        return True
    return not args.file and not args.slack_token


def _configure_logging(silent: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if silent else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )


def _failure_message(err: PromplotError) -> str:
    for kind, message in _FAILURE_MESSAGES:
        if isinstance(err, kind):
            return message
    return "failed"


def run(args: argparse.Namespace) -> None:
    """Fetch, plot, and deliver. Raises PromplotError on the first failure."""
    query_time = args.query_time or datetime.now(timezone.utc)

    logger.info("Querying Prometheus %r", args.query)
    matrix = get_metrics(args.url, args.query, query_time, args.duration, DEFAULT_NUM_POINTS)
    if not matrix:
        raise FetchError(f"no data returned for query {args.query!r}")

    logger.info("Creating plot %r", args.title)
    image = plot_to_bytes(matrix, args.title, args.fmt)

    if args.file:
        if args.file == STDOUT_PATH:
            logger.info("Writing to stdout")
        else:
            logger.info("Writing to '%s'", args.file)
        write_file(image, args.file)

    if args.slack_token:
        logger.info("Uploading to Slack channel %r", args.channel)
        upload_file(args.slack_token, args.channel, args.title, image, filename=f"promplot.{args.fmt.lower()}")

    logger.info("Done")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"promplot {__version__} {sys.platform} {platform.machine()}")
        return 0

    if _missing_required(args):
        parser.print_help(sys.stderr)
        return 1

    _configure_logging(args.silent)
    try:
        run(args)
    except PromplotError as e:
        logger.error("%s: %s", _failure_message(e), e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
