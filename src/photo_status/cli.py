"""Command line entrypoint for watching photo processing status.

Usage:
    photo-status watch 12,13,14
    photo-status watch 12 --timeout 120
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from photo_status.app_logging import configure_logging
from photo_status.config import Settings, parse_photo_ids
from photo_status.containers import AppContainer, build_container
from photo_status.domain.status import Status

EXIT_DONE = 0
EXIT_NOT_DONE = 1
EXIT_TIMEOUT = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog="photo-status")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    watch = commands.add_parser("watch", help="poll photos until they settle")
    watch.add_argument("photo_ids", help="comma separated photo ids")
    watch.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="give up after this many seconds",
    )
    return parser


async def watch(
    container: AppContainer, photo_ids: list[int], timeout: float | None
) -> int:
    """Monitor photos until each one is done or failed and print the outcome."""
    service = container.photo_status_service
    for photo_id in photo_ids:
        service.start_monitoring(photo_id)
    try:
        await service.wait_until_settled(photo_ids, timeout=timeout)
    except TimeoutError:
        logger.warning("Timed out waiting for %d photo(s)", len(photo_ids))
        exit_code = EXIT_TIMEOUT
    else:
        all_done = all(service.get_status(pid) is Status.DONE for pid in photo_ids)
        exit_code = EXIT_DONE if all_done else EXIT_NOT_DONE
    finally:
        await container.close_resources()

    for photo_id in photo_ids:
        line = f"{photo_id}: {service.get_status(photo_id).name}"
        error = service.get_last_error(photo_id)
        if error:
            line = f"{line} ({error})"
        print(line)
    return exit_code


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        photo_ids = parse_photo_ids(args.photo_ids)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_NOT_DONE
    if not photo_ids:
        print("error: no photo ids given", file=sys.stderr)
        return EXIT_NOT_DONE

    async def _run() -> int:
        container = build_container(settings)
        return await watch(container, photo_ids, args.timeout)

    return asyncio.run(_run())


if __name__ == "__main__":
    sys.exit(main())
