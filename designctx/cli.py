"""CLI entrypoints for designctx commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict

from .analyzers.complexity import ComplexityAnalyzer
from .config import ConfigError, DesignCtxConfig, load_config
from .logging import configure_logging
from .models import DesignDocument
from .orchestrator import ContextOrchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_document_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Path to a design file JSON export.")
    parser.add_argument(
        "--tech-stack",
        default=None,
        help="Target tech stack used for architecture recommendations (e.g. 'react').",
    )
    parser.add_argument(
        "--config",
        default=".",
        help="Directory containing .designctx.yml (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="designctx",
        description="Extract design and technical context from design documents.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_parser = subparsers.add_parser(
        "extract",
        help="Extract the full design and technical context of a design file.",
    )
    _add_verbose_option(extract_parser, suppress_default=True)
    _add_document_arguments(extract_parser)
    extract_parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Bypass the context cache for this run.",
    )
    extract_parser.add_argument(
        "--output",
        default=None,
        help="Write the context JSON to this path instead of stdout.",
    )

    complexity_parser = subparsers.add_parser(
        "complexity",
        help="Report the engineering complexity assessment of a design file.",
    )
    _add_verbose_option(complexity_parser, suppress_default=True)
    _add_document_arguments(complexity_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for designctx commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
        return

    try:
        config = load_config(Path(args.config))
        payload = _read_document(Path(args.file))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")
    except (OSError, ValueError) as exc:
        parser.exit(1, f"Cannot read design file: {exc}\n")

    if args.command == "extract":
        options: Dict[str, Any] = {}
        if args.no_cache:
            options["enableCaching"] = False
        if args.tech_stack:
            options["techStack"] = args.tech_stack
        result = asyncio.run(_extract(config, payload, options))
        _emit(result, args.output)
    elif args.command == "complexity":
        try:
            document = DesignDocument.from_dict(payload)
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
        tech_stack = args.tech_stack or config.analysis.tech_stack
        report = ComplexityAnalyzer().analyze_complexity(document, tech_stack)
        _emit(report.to_dict(), None)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


async def _extract(
    config: DesignCtxConfig, payload: Dict[str, Any], options: Dict[str, Any]
) -> Dict[str, Any]:
    orchestrator = ContextOrchestrator(config)
    try:
        context = await orchestrator.extract_context(payload, options or None)
    finally:
        await orchestrator.close()
    return context.to_dict()


def _read_document(path: Path) -> Dict[str, Any]:
    data = json.loads(path.expanduser().read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path.name} must contain a JSON object")
    return data


def _emit(data: Dict[str, Any], output: str | None) -> None:
    rendered = json.dumps(data, indent=2, default=str)
    if output is None:
        print(rendered)
        return
    target = Path(output).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(rendered + "\n", encoding="utf-8")
    print(f"Context written to {_relativize(target)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
