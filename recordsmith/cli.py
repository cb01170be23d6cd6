# To run:
# python -m recordsmith generate schema.json --count 10

import json
import logging
import traceback
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from recordsmith.config import AppConfig, EngineConfig
from recordsmith.engine import Engine
from recordsmith.errors import GenerationError, InternalError, RecordsmithError
from recordsmith.limits import count_fields, count_items
from recordsmith.logging_setup import setup_logging
from recordsmith.schema_io import load_schema_from_json
from recordsmith.schema_model import describe_data_types

logger = logging.getLogger("cli")

EXIT_INTERNAL = 1
EXIT_INVALID = 2
EXIT_GENERATION = 3

app = typer.Typer(no_args_is_help=True, pretty_exceptions_show_locals=False)


def _exit_code(exc: RecordsmithError) -> int:
    if isinstance(exc, InternalError):
        return EXIT_INTERNAL
    if isinstance(exc, GenerationError):
        return EXIT_GENERATION
    return EXIT_INVALID


def _app_config() -> AppConfig:
    try:
        return AppConfig.from_env()
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=EXIT_INVALID) from exc


def _fail(exc: RecordsmithError, debug: bool) -> None:
    logger.error("%s error: %s", exc.category, exc)
    if debug:
        traceback.print_exc()
    typer.echo(str(exc), err=True)
    raise typer.Exit(code=_exit_code(exc))


@app.command()
def generate(
    schema_file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="JSON schema file")],
    count: Annotated[Optional[int], typer.Option("--count", "-n", min=1, help="Number of records")] = None,
    seed: Annotated[Optional[int], typer.Option(help="Seed for repeatable output")] = None,
    indent: Annotated[Optional[int], typer.Option(min=0, help="JSON indent (0 for compact)")] = None,
    output: Annotated[Optional[Path], typer.Option("--output", "-o", dir_okay=False, help="Write to a file instead of stdout")] = None,
    log_level: Annotated[Optional[str], typer.Option(help="Override RECORDSMITH_LOG_LEVEL")] = None,
):
    """Generate records for SCHEMA_FILE and print them as a JSON array."""
    cfg = _app_config()
    setup_logging(log_level or cfg.log_level)

    engine = Engine(config=EngineConfig(seed=seed))
    n = count or cfg.default_count
    try:
        schema = load_schema_from_json(
            str(schema_file),
            known_types=engine.data_types,
            config=engine.config,
            reference=engine.reference,
        )
        records = engine.generate(schema, n)
    except RecordsmithError as exc:
        _fail(exc, cfg.debug)

    width = cfg.indent if indent is None else indent
    text = json.dumps(records, indent=width or None, ensure_ascii=False)
    if output is not None:
        output.write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote %d records to %s", n, output)
    else:
        typer.echo(text)


@app.command()
def validate(
    schema_file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, help="JSON schema file")],
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Record count to check limits against")] = 1,
):
    """Validate SCHEMA_FILE and report its field and item counts."""
    cfg = _app_config()
    setup_logging(cfg.log_level)

    engine = Engine()
    try:
        schema = load_schema_from_json(
            str(schema_file),
            known_types=engine.data_types,
            config=engine.config,
            reference=engine.reference,
        )
        engine.validate(schema, count)
    except RecordsmithError as exc:
        _fail(exc, cfg.debug)

    typer.echo(f"OK fields={count_fields(schema)} items={count_items(schema, engine.config.default_array_count) * count}")


@app.command("types")
def list_types():
    """List supported data types with their parameters."""
    for info in describe_data_types():
        params = ", ".join(info["parameters"])
        typer.echo(f"{info['dataType']:<14} {info['category']:<10} {info['description']}")
        typer.echo(f"{'':<14} params: {params}")


def main() -> int:
    try:
        app()
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
