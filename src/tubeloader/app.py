"""Command-line entry point for tubeloader."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .core import (
    FilterRule,
    StreamDownloader,
    TubeLoaderError,
    YouTubeClient,
    build_url,
    is_valid_id,
    select_best,
)
from .core.http import build_session
from .core.selector import build_rules, matches_all
from .utils import Config, default_output_path, log_error
from .version import __version__

logger = logging.getLogger(__name__)


def filter_rule(value: str) -> FilterRule:
    """argparse type for rules such as 'height>=720'."""
    try:
        return FilterRule.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tubeloader",
        description="Resolve a video URL into its streams and download one of them.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="Path to a JSON settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show video details")
    info.add_argument("url", help="Video URL or bare video ID")

    streams = subparsers.add_parser("streams", help="List the video's streams")
    streams.add_argument("url", help="Video URL or bare video ID")
    streams.add_argument(
        "-f", "--filter", dest="filters", type=filter_rule, action="append", default=[],
        help="Stream filter such as 'height>=720' (repeatable; all must match)",
    )

    download = subparsers.add_parser("download", help="Download a stream")
    download.add_argument("url", help="Video URL or bare video ID")
    download.add_argument(
        "-f", "--filter", dest="filters", type=filter_rule, action="append", default=[],
        help="Stream filter such as 'has_audio==true' (repeatable; all must match)",
    )
    download.add_argument(
        "-i", "--index", type=int,
        help="Download the stream at this position of the stream list instead of the best one",
    )
    download.add_argument("-o", "--output", type=Path, help="Destination file path")
    return parser


def _print_info(client: YouTubeClient) -> None:
    meta = client.get_video_info()
    print(f"Title:   {meta.title}")
    print(f"Creator: {meta.creator}")
    print(f"Views:   {meta.view_count}")
    print(f"URL:     {build_url(meta.video_id)}")
    if meta.keywords:
        print(f"Tags:    {', '.join(meta.keywords)}")
    if meta.best_thumbnail:
        print(f"Thumb:   {meta.best_thumbnail.url}")
    print(f"Streams: {len(meta.streams)}")
    if meta.short_description:
        print()
        print(meta.short_description)


def _print_streams(client: YouTubeClient, filters: List[FilterRule]) -> None:
    meta = client.get_video_info()
    rules = build_rules(filters)
    shown = 0
    # Indexes are positions in meta.streams, as accepted by 'download --index'.
    for index, stream in enumerate(meta.streams):
        if not matches_all(stream, rules):
            continue
        shown += 1
        audio = "audio" if stream.has_audio else "no audio"
        print(
            f"[{index:2d}] itag={stream.itag:<4d} {stream.resolution:>10} "
            f"{stream.quality_label:>7} {stream.fps:>3}fps {audio:<8} {stream.mime_type}"
        )
    if not shown:
        print("No streams match the given filters.")


def _download(client: YouTubeClient, config: Config, args: argparse.Namespace) -> Path:
    meta = client.get_video_info()
    if args.index is not None:
        if 0 <= args.index < len(meta.streams):
            stream = meta.streams[args.index]
        else:
            stream = None
    else:
        stream = select_best(meta, args.filters)

    def on_progress(percent: float, current: int, total: int) -> None:
        print(f"\r{percent:5.1f}% ({current}/{total} bytes)", end="", flush=True)

    output = args.output
    if output is None and stream is not None:
        output = default_output_path(config.download_path, meta, stream)

    downloader = StreamDownloader(
        client,
        download_path=output,
        chunk_size=config.chunk_size,
        timeout=config.timeout,
        progress_callback=on_progress,
    )
    if args.index is not None:
        path = downloader.download_at_index(args.index)
    else:
        path = downloader.download(stream)
    print()
    return path


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    config = Config(args.config)
    url = build_url(args.url) if is_valid_id(args.url) else args.url
    client = YouTubeClient(
        url,
        session=build_session(config.user_agent),
        info_url=config.info_url,
        timeout=config.timeout,
    )

    try:
        if args.command == "info":
            _print_info(client)
        elif args.command == "streams":
            _print_streams(client, args.filters)
        else:
            path = _download(client, config, args)
            print(f"Saved to {path}")
    except (TubeLoaderError, OSError) as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main():
    """Main entry point."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error in main(): {e}", exc_info=True)
        log_error("Fatal error in main()", e)
        raise


if __name__ == "__main__":
    main()
