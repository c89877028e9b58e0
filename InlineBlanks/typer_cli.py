#!/usr/bin/env python
"""
Typer front-end for inlineblanks.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from importlib import metadata
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from dotenv import load_dotenv

from InlineBlanks.config import ExerciseConfig, Settings, load_exercises, select_exercise
from InlineBlanks.exercise import InlineBlanksExercise
from InlineBlanks.progress import YamlProgressStore

log = logging.getLogger(__name__)


class InlineBlanksError(Exception):
    """User-facing error for CLI operations."""


OUTPUT_FORMATS = ("markdown", "html")


app = typer.Typer(
    add_completion=True,
    no_args_is_help=True,
    help="Fill-in-the-blank exercises from bracket syntax.",
)


def _get_cli_version() -> str:
    try:
        return metadata.version("inline-blanks")
    except metadata.PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool) -> None:
    if not value:
        return
    typer.echo(f"inlineblanks {_get_cli_version()}")
    raise typer.Exit()


@app.callback()
def _app_callback(
    version: bool = typer.Option(
        False,
        "--version",
        is_eager=True,
        callback=_version_callback,
        help="Show version and exit.",
    ),
) -> None:
    del version


def _enable_debug_logging() -> None:
    logging.getLogger().setLevel(logging.DEBUG)
    for handler in logging.getLogger().handlers:
        handler.setLevel(logging.DEBUG)
    for logger_name in ["InlineBlanks", "__main__"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)


@contextmanager
def _inlineblanks_error_boundary():
    try:
        yield
    except InlineBlanksError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def _configure_runtime(*, env: str, debug: bool) -> Settings:
    load_dotenv(env)
    if debug:
        _enable_debug_logging()
    return Settings.from_env()


def _load_config(exercise_yaml: str, name: Optional[str]) -> ExerciseConfig:
    try:
        return select_exercise(load_exercises(exercise_yaml), name)
    except FileNotFoundError as exc:
        raise InlineBlanksError(f"Exercise file not found: {exercise_yaml}") from exc
    except yaml.YAMLError as exc:
        raise InlineBlanksError(f"Could not parse {exercise_yaml}: {exc}") from exc
    except ValueError as exc:
        raise InlineBlanksError(f"{exercise_yaml}: {exc}") from exc


def _load_progress(progress: Optional[str]) -> Optional[YamlProgressStore]:
    if progress is None:
        return None
    try:
        return YamlProgressStore(progress)
    except (ValueError, yaml.YAMLError) as exc:
        raise InlineBlanksError(str(exc)) from exc


@app.command("parse")
def parse_command(
    exercise_yaml: Optional[str] = typer.Option(None, "--yaml", help="Path to exercise YAML."),
    text: Optional[str] = typer.Option(None, "--text", help="Markdown text with [blanks]."),
    name: Optional[str] = typer.Option(None, "--name", help="Exercise name within the YAML file."),
) -> None:
    """List the blanks found in an exercise."""
    with _inlineblanks_error_boundary():
        if (exercise_yaml is None) == (text is None):
            raise InlineBlanksError("Give exactly one of --yaml or --text.")
        source = text if text is not None else _load_config(exercise_yaml, name).content
        exercise = InlineBlanksExercise.from_markdown(source)
        specs = exercise.specs
        if not specs:
            typer.echo("No blanks found.")
            return
        for spec in specs:
            line = f"{spec.index}: {spec.answer!r}"
            if spec.local_options:
                line += f" options={list(spec.local_options)!r}"
            if spec.hint is not None:
                line += f" hint={spec.hint!r}"
            typer.echo(line)
        if exercise.is_table:
            typer.echo("(table layout)")


@app.command("render")
def render_command(
    exercise_yaml: str = typer.Option(..., "--yaml", help="Path to exercise YAML."),
    name: Optional[str] = typer.Option(None, "--name", help="Exercise name within the YAML file."),
    output_format: str = typer.Option("markdown", "--format", help="Output format: markdown|html."),
    reveal: bool = typer.Option(False, "--reveal", help="Fill every blank with its answer."),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
    """Render an exercise with its blanks replaced by inputs."""
    with _inlineblanks_error_boundary():
        if output_format not in OUTPUT_FORMATS:
            raise InlineBlanksError(f"Unknown format '{output_format}' (expected one of: {', '.join(OUTPUT_FORMATS)})")
        settings = _configure_runtime(env=env, debug=debug)
        exercise = InlineBlanksExercise.from_config(_load_config(exercise_yaml, name), settings=settings)
        if reveal:
            exercise.show_all_answers()
        typer.echo(exercise.render().render(output_format))


@app.command("check")
def check_command(
    exercise_yaml: str = typer.Option(..., "--yaml", help="Path to exercise YAML."),
    answers: List[str] = typer.Option([], "--answer", "-a", help="Answer for the next blank (repeatable)."),
    name: Optional[str] = typer.Option(None, "--name", help="Exercise name within the YAML file."),
    submit: bool = typer.Option(False, "--submit", help="Validate every blank, including empty ones."),
    progress: Optional[str] = typer.Option(None, "--progress", help="YAML file recording completed exercises."),
    env: str = typer.Option(str(Path.home() / ".env"), "--env", help="Path to .env file."),
    debug: bool = typer.Option(False, "--debug", help="Set logging level to debug."),
) -> None:
    """Type the given answers into the blanks in order and report each one."""
    with _inlineblanks_error_boundary():
        settings = _configure_runtime(env=env, debug=debug)
        config = _load_config(exercise_yaml, name)
        exercise = InlineBlanksExercise.from_config(
            config, settings=settings, progress_store=_load_progress(progress)
        )
        if len(answers) > len(exercise.specs):
            raise InlineBlanksError(
                f"Got {len(answers)} answers but '{config.name}' has {len(exercise.specs)} blank(s)."
            )
        for index, answer in enumerate(answers):
            exercise.handle_input_change(index, answer)
            exercise.handle_blur(index)
        if submit:
            exercise.check_answers()

        for spec, status in zip(exercise.specs, exercise.statuses()):
            if status.show_validation and status.is_correct:
                verdict = typer.style("correct", fg=typer.colors.GREEN)
            elif status.is_wrong:
                verdict = typer.style("wrong", fg=typer.colors.RED)
            else:
                verdict = "unanswered"
            typer.echo(f"{spec.index}: {status.value!r} {verdict}")

        if exercise.all_correct:
            typer.echo(f"All blanks correct ({exercise.exercise_id}).")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
