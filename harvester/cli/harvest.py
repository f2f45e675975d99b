"""CLI to download the exam question bank into the local cache."""
import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from harvester.tools.catalogs import load_categories, load_languages, prepare_bases
from harvester.tools.remote import ExamApiClient
from harvester.tools.settings import load_settings
from harvester.tools.store import FileStore
from harvester.tools.walker import harvest


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Download languages, categories, tickets, images and explanations"
    )
    parser.add_argument(
        "--base-url",
        type=str,
        help="API origin (default: $HARVESTER_BASE_URL or https://api-my.sa.gov.ge)"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Cache root directory (default: $HARVESTER_DATA_DIR or ./data)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: wait forever)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every fetch and write"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (includes HTTP connection details)"
    )
    return parser


def configure_logging(verbose: bool, debug: bool) -> None:
    if debug:
        log_level = logging.DEBUG
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        log_level = logging.INFO
        log_format = "%(asctime)s - %(levelname)s - %(message)s"
    else:
        log_level = logging.WARNING
        log_format = "%(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def print_summary(stats: dict) -> None:
    table = Table(title="Harvest Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="magenta", justify="right")

    table.add_row("Language x category cells", str(stats["cells"]))
    table.add_row("Tickets seen", str(stats["tickets"]))
    table.add_row("Tickets written", str(stats["tickets_written"]))
    table.add_row("Tickets already cached", str(stats["tickets_skipped"]))
    table.add_row("Explanations fetched", str(stats["explanations_fetched"]))
    table.add_row("Explanations missing (placeholder)", str(stats["explanations_missing"]))
    table.add_row("Images fetched", str(stats["images_fetched"]))
    table.add_row("Images missing (.error marker)", str(stats["images_missing"]))
    table.add_row("Image checks already cached", str(stats["images_skipped"]))

    console.print(table)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.debug)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(
            base_url=args.base_url,
            data_dir=args.data_dir,
            timeout=args.timeout,
        )
        logger.info(f"API: {settings.base_url}")
        logger.info(f"Cache: {settings.data_dir.resolve()}")

        store = FileStore(settings.data_dir)
        client = ExamApiClient(settings.base_url, timeout=settings.timeout)

        prepare_bases(store)
        languages = load_languages(store, client)
        categories = load_categories(store, client)

        pbar = tqdm(total=len(languages) * len(categories), desc="Harvesting", unit="cell")

        def progress_callback(language, category):
            pbar.set_postfix_str(f"{language.language or language.id} / {category.category_name or category.id}")
            pbar.update(1)

        try:
            stats = harvest(store, client, languages, categories, progress_callback=progress_callback)
        finally:
            pbar.close()

    except Exception:
        logger.exception("Harvest aborted")
        return 1

    print_summary(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
