import argparse
import dataclasses
import logging
import sys
from typing import Optional, Sequence

from articlecrawl import config as env
from articlecrawl.configs import load_config_file
from articlecrawl.container import Container
from articlecrawl.domain.crawl_state import CrawlState
from articlecrawl.exceptions import ConfigError, PersistFailure, RenderingSessionUnavailable
from articlecrawl.services.result_sink import WriteMode

logger = logging.getLogger("articlecrawl.run")

EXIT_OK = 0
EXIT_PERSIST_FAILED = 1
EXIT_STARTUP_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl a paginated listing and save articles to CSV.")
    parser.add_argument("job", help="path to a crawl job YAML file")
    parser.add_argument("-o", "--output", help="CSV destination (overrides output.path)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--append", dest="mode", action="store_const", const=WriteMode.APPEND.value, help="append to the CSV file")
    mode.add_argument("--overwrite", dest="mode", action="store_const", const=WriteMode.OVERWRITE.value, help="replace the CSV file")
    parser.add_argument("--pages", type=int, help="number of listing pages (overrides page_count)")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None, container: Optional[Container] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, env.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    container = container or Container()

    try:
        job = load_config_file(args.job, parser=container.config_parser())
    except ConfigError as e:
        logger.error("%s", e)
        return EXIT_STARTUP_FAILED

    if args.pages is not None:
        if args.pages < 1:
            logger.error("--pages must be >= 1")
            return EXIT_STARTUP_FAILED
        job.data = dataclasses.replace(job.data, page_count=args.pages)

    destination = args.output or job.data.output_path
    if not destination:
        logger.error("No output destination: pass --output or set output.path in %s", args.job)
        return EXIT_STARTUP_FAILED
    write_mode = WriteMode(args.mode or job.data.output_mode)

    logger.info("Starting crawl %s: %s (%s pages, mode=%s)", job.name, job.base_url, job.page_count, job.fetch_mode)
    state = CrawlState()
    executor = container.crawl_executor()
    try:
        executor.run(job, state=state)
    except RenderingSessionUnavailable as e:
        logger.error("Cannot start rendering session: %s", e)
        return EXIT_STARTUP_FAILED
    except KeyboardInterrupt:
        logger.warning("Interrupted; saving %s records collected so far", len(state.collected_records))
        state.stopped = True

    for failure in state.failures:
        logger.warning("Failed: %s (%s)", failure.url, failure.reason)

    try:
        container.result_sink().persist(state.collected_records, destination, mode=write_mode)
    except PersistFailure as e:
        logger.error("%s", e)
        return EXIT_PERSIST_FAILED

    logger.info(
        "Crawl %s done: %s records, %s failures, %s links discovered",
        job.name,
        len(state.collected_records),
        len(state.failures),
        len(state.discovered_links),
    )
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
