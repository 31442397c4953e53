"""MarkLogic plugin CLI.

Usage:
    marklogic-plugin validate batchsource --properties source.json
    marklogic-plugin validate batchsink --properties sink.json --input-schema schema.json
    marklogic-plugin read --properties source.json --arg collection=orders
    marklogic-plugin run-action --properties action.json
    marklogic-plugin serve
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from marklogic_plugin.application.dtos.validation_dto import StageValidationRequestDTO
from marklogic_plugin.application.plugins.action import MarkLogicAction
from marklogic_plugin.application.plugins.source import MarkLogicSource
from marklogic_plugin.domain.entities.errors import DomainError
from marklogic_plugin.main.config import AppSettings, get_settings
from marklogic_plugin.main.container import AppContainer, init_container
from marklogic_plugin.shared import configure_logging, get_logger

logger = get_logger(__name__)


def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _parse_arguments(pairs: Optional[List[str]]) -> Dict[str, str]:
    arguments: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Runtime argument '{pair}' must look like key=value")
        arguments[key.strip()] = value
    return arguments


def cmd_validate(args: argparse.Namespace, container: AppContainer) -> int:
    request = StageValidationRequestDTO(
        plugin_type=args.plugin_type,
        properties=_load_json(args.properties),
        input_schema=_load_json(args.input_schema) if args.input_schema else None,
    )
    response = container.validate_stage_use_case().execute(request)
    print(response.model_dump_json(indent=2))
    return 0 if response.valid else 1


async def _read(source: MarkLogicSource, arguments: Dict[str, str]) -> int:
    count = 0
    async for record in source.read_all(arguments):
        print(json.dumps(record, default=lambda v: v.decode("utf-8", "replace")))
        count += 1
    return count


def cmd_read(args: argparse.Namespace, container: AppContainer) -> int:
    source = container.plugin_registry().create_stage(
        MarkLogicSource.plugin_type, _load_json(args.properties)
    )
    count = asyncio.run(_read(source, _parse_arguments(args.arg)))
    logger.info("cli.read.completed", records=count)
    return 0


def cmd_run_action(args: argparse.Namespace, container: AppContainer) -> int:
    action = container.plugin_registry().create_stage(
        MarkLogicAction.plugin_type, _load_json(args.properties)
    )
    result = asyncio.run(action.run(_parse_arguments(args.arg)))
    if result:
        print(result)
    return 0


def cmd_serve(args: argparse.Namespace, settings: AppSettings) -> int:
    import uvicorn

    uvicorn.run(
        "marklogic_plugin.main.app:app",
        host=args.host or settings.api.host,
        port=args.port or settings.api.port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marklogic-plugin",
        description="MarkLogic pipeline plugin tools",
    )
    sub = parser.add_subparsers(dest="command")

    validate_parser = sub.add_parser("validate", help="Validate stage properties")
    validate_parser.add_argument("plugin_type", choices=["batchsource", "batchsink", "action"])
    validate_parser.add_argument("--properties", required=True, help="JSON file of properties")
    validate_parser.add_argument("--input-schema", help="JSON file with the sink input schema")

    for name, help_text in (
        ("read", "Read records with a source config and print them as JSON lines"),
        ("run-action", "Evaluate the query of an action config"),
    ):
        stage_parser = sub.add_parser(name, help=help_text)
        stage_parser.add_argument("--properties", required=True, help="JSON file of properties")
        stage_parser.add_argument(
            "--arg", action="append", help="Runtime argument for macros (key=value)"
        )

    serve_parser = sub.add_parser("serve", help="Start the validation API")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    # stdout carries command output
    settings = get_settings()
    configure_logging(
        level=settings.logging.level.value,
        file_path=settings.logging.file_path,
        environment=settings.environment.value,
        stream=sys.stderr,
    )

    if args.command == "serve":
        return cmd_serve(args, settings)

    container = init_container(settings)
    commands = {
        "validate": cmd_validate,
        "read": cmd_read,
        "run-action": cmd_run_action,
    }
    try:
        return commands[args.command](args, container)
    except (DomainError, ValueError, OSError) as exc:
        logger.error("cli.command_failed", command=args.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
