# src/main.py - v1
"""CLI entry point: ask, warm, normalize, sources commands.

Usage:
    ragcache ask "What is NIS2?" [-d report.pdf] [-t customers] [options]
    ragcache warm
    ragcache normalize "What is the capital of France?"
    ragcache sources [--schema TABLE]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from ragcache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        settings = _load_settings(args)
    except Exception as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        return asyncio.run(args.func(args, settings))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ragcache",
        description=f"ragcache v{__version__} - answers prompts from documents, tables and a local model",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- ask ---
    p_ask = subparsers.add_parser("ask", help="Answer a prompt")
    p_ask.add_argument("prompt", nargs="+", help="Prompt text")
    p_ask.add_argument(
        "-d", "--document", action="append", default=[], dest="documents",
        help="Use this document instead of ranking (repeatable)",
    )
    p_ask.add_argument(
        "-t", "--table", action="append", default=[], dest="tables",
        help="Use this table instead of ranking (repeatable)",
    )
    p_ask.add_argument("--temperature", type=float, default=None, help="Sampling temperature")
    p_ask.add_argument("--max-tokens", type=int, default=None, help="Generation cap")
    p_ask.add_argument(
        "--budget", type=float, default=None,
        help="Request budget in seconds (default: REQUEST_BUDGET_S)",
    )
    p_ask.add_argument(
        "--simple", action="store_true",
        help="Ask the model directly, without retrieval",
    )
    p_ask.add_argument("--json", action="store_true", help="Print the full response as JSON")
    p_ask.set_defaults(func=_cmd_ask)

    # --- warm ---
    p_warm = subparsers.add_parser("warm", help="Preload documents and tables")
    p_warm.set_defaults(func=_cmd_warm)

    # --- normalize ---
    p_norm = subparsers.add_parser("normalize", help="Print the cache key of a prompt")
    p_norm.add_argument("prompt", nargs="+", help="Prompt text")
    p_norm.set_defaults(func=_cmd_normalize)

    # --- sources ---
    p_sources = subparsers.add_parser("sources", help="List documents and tables")
    p_sources.add_argument("--schema", default=None, metavar="TABLE", help="Show columns of a table")
    p_sources.set_defaults(func=_cmd_sources)

    return parser


def _load_settings(args: argparse.Namespace):
    from ragcache.config.settings import Settings
    from ragcache.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    return settings


async def _cmd_ask(args: argparse.Namespace, settings) -> int:
    """Answer one prompt and print it."""
    from ragcache.api.facade import create_service, process_prompt
    from ragcache.api.models import ModelParameters, PromptRequest

    prompt = " ".join(args.prompt)
    orchestrator = await create_service(settings)

    if args.simple:
        print(await orchestrator.generate_simple(prompt, args.temperature))
        return 0

    params = None
    if args.temperature is not None or args.max_tokens is not None:
        params = ModelParameters(
            temperature=settings.llm_default_temperature if args.temperature is None else args.temperature,
            max_tokens=args.max_tokens or settings.llm_max_tokens,
        )
    request = PromptRequest(
        prompt=prompt,
        document_references=args.documents,
        database_references=args.tables,
        model_parameters=params,
    )
    response = await process_prompt(request, orchestrator, budget_s=args.budget)

    if args.json:
        print(response.model_dump_json(indent=2))
    else:
        _print_response(response)
    return 0 if response.answer_path != "degraded" else 3


async def _cmd_warm(args: argparse.Namespace, settings) -> int:
    """Preload caches and report counts."""
    from ragcache.api.facade import build_orchestrator, warm_caches

    report = await warm_caches(build_orchestrator(settings))
    print("\nWarm-up complete:")
    print(f"  Documents: {report.documents_loaded}/{report.documents_listed}")
    print(f"  Tables:    {report.tables_loaded}/{report.tables_listed}")
    print(f"  Duration:  {report.duration_s:.1f}s")
    return 0


async def _cmd_normalize(args: argparse.Namespace, settings) -> int:
    """Print the normalized cache key."""
    from ragcache.core.normalizer import normalize_prompt

    print(normalize_prompt(" ".join(args.prompt)))
    return 0


async def _cmd_sources(args: argparse.Namespace, settings) -> int:
    """List available documents and tables, or one table's schema."""
    from ragcache.api.facade import build_orchestrator

    orchestrator = build_orchestrator(settings)
    tables = orchestrator.tables

    if args.schema:
        if tables is None:
            logger.error("No database configured (DATABASE_PATH)")
            return 1
        for column in await tables.table_schema(args.schema):
            flags = " PK" if column["pk"] else ""
            print(f"  {column['name']:24s} {column['type']}{flags}")
        return 0

    documents = await orchestrator.documents.list_documents() if orchestrator.documents else []
    print(f"\nDocuments ({len(documents)}):")
    for name in documents:
        print(f"  {name}")
    if tables is not None:
        names = await tables.list_tables()
        print(f"\nTables ({len(names)}):")
        for name in names:
            print(f"  {name}")
    return 0


def _print_response(response: object) -> None:
    """Print a human-readable answer with its sources."""
    print(f"\n{response.response}\n")
    print(f"  Answered via: {response.answer_path}{' (cached)' if response.cached else ''}")
    for doc in response.document_sources:
        print(f"  Document:     {doc.filename} ({doc.type})")
    for table in response.database_sources:
        print(f"  Table:        {table.table_name}")


if __name__ == "__main__":
    sys.exit(main())
