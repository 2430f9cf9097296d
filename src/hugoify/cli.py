"""Command-line entry point: publish a Notion database as Hugo content."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from hugoify.assembler import DocumentAssembler
from hugoify.config import DEFAULT_CONFIG_FILE, TOKEN_ENV_VAR, HugoifyConfig, load_config
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.errors import HugoifyConfigurationError, HugoifyError
from hugoify.media import build_media_store
from hugoify.models import PageStatus
from hugoify.notion_api import NotionSource, NotionTransport
from hugoify.observability import get_logger, log_event
from hugoify.pipeline import run_batch
from hugoify.template import TemplateWriter

log = get_logger("hugoify.cli")

EXIT_OK = 0
EXIT_PAGE_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hugoify",
        description="Convert pages of a Notion database into Hugo Markdown documents.",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        type=Path,
        help=f"Path to the JSON configuration file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Override the content folder from the configuration",
    )
    parser.add_argument(
        "--template",
        type=Path,
        help="Override the archetype template from the configuration",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for the JSON log stream on stderr",
    )
    return parser


def _require_credentials(config: HugoifyConfig) -> None:
    if not config.database_id:
        raise HugoifyConfigurationError(
            "databaseID is not set", context={"field": "database_id"},
        )
    if not config.token:
        raise HugoifyConfigurationError(
            f"{TOKEN_ENV_VAR} environment variable is not set",
            context={"field": "token"},
        )


def run(config: HugoifyConfig) -> int:
    """Wire the pipeline for *config* and process every pending page."""
    _require_credentials(config)
    writer = TemplateWriter(config.template_path)
    store = build_media_store(config)
    renderer = MarkdownRenderer(config, media_store=store)
    assembler = DocumentAssembler(config, renderer, writer)

    try:
        with NotionTransport(config) as transport:
            report = run_batch(NotionSource(config, transport), assembler, config)
    finally:
        close = getattr(store, "close", None)
        if close is not None:
            close()

    print(
        f"converted={report.count(PageStatus.CONVERTED)} "
        f"skipped={report.count(PageStatus.SKIPPED)} "
        f"deleted={report.count(PageStatus.DELETED)} "
        f"failed={report.count(PageStatus.FAILED)}"
    )
    return EXIT_PAGE_FAILURES if report.failed else EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.getLogger("hugoify").setLevel(args.log_level)

    overrides = {}
    if args.output is not None:
        overrides["output_root"] = str(args.output)
    if args.template is not None:
        overrides["template_path"] = str(args.template)

    try:
        config = load_config(args.config, **overrides)
        return run(config)
    except HugoifyConfigurationError as exc:
        log_event(log, logging.ERROR, "configuration error", error=exc.message, context=exc.context)
        print(f"hugoify: {exc.message}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except HugoifyError as exc:
        # Errors outside any single page, e.g. the database query itself.
        log_event(
            log, logging.ERROR, "batch aborted",
            code=getattr(exc.code, "value", exc.code), error=exc.message,
        )
        print(f"hugoify: {exc.message}", file=sys.stderr)
        return EXIT_PAGE_FAILURES


if __name__ == "__main__":
    sys.exit(main())
