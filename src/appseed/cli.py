"""
appseed.cli - Command Line Interface
====================================

This module provides the command-line interface for appseed using Typer,
with Rich for terminal output and questionary for interactive prompts.

Architecture
------------
The CLI is structured around Typer's app pattern:

    app (main entry point)
    ├── new   - Scaffold a new application
    └── list  - Show available templates

``new`` prompts for any value not given on the command line or in a
``--config`` file. The --yes flag skips all prompts for scripted usage.

Usage Examples
--------------
Interactive mode (prompts for missing values):
    $ appseed new ./demo

Non-interactive mode:
    $ appseed new ./demo --lang c --name demo --title "Demo App" \\
        --author Jane --option include_libhlapi=true --yes

From a configuration file:
    $ appseed new ./demo --config app.toml --yes

See Also
--------
- generator.py: Scaffolding pipeline
- models.py: Descriptor and template models
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import questionary
import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from appseed import __version__
from appseed.errors import ScaffoldError
from appseed.generator import create_app
from appseed.models import (
    OptionType,
    Template,
    TemplateOption,
    default_name_from_title,
    load_app_settings,
)
from appseed.store import TemplateStore


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="appseed",
    help="Scaffold hello world applications for C, C++ and Go.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=True,
)

# Console for rich output
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich; DEBUG when verbose, else warnings only."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def print_error(message: object) -> None:
    """Print an error; the message is escaped so ``[app]`` isn't read as markup."""
    rprint(f"[red]Error:[/] {escape(str(message))}")


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """
    Display version information and exit.

    Parameters
    ----------
    value : bool
        True if --version was passed.
    """
    if value:
        console.print(Panel(
            f"[bold green]appseed[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Hello world application scaffolder[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Interactive Prompts
# =============================================================================

def _ask(question: questionary.Question) -> Any:
    result = question.ask()
    if result is None:
        raise typer.Abort()
    return result


def prompt_lang(store: TemplateStore) -> str:
    """
    Interactively prompt for the template to use.

    Returns
    -------
    str
        The selected ecosystem key.
    """
    choices = [
        questionary.Choice(
            title=f"{template.key:<6} - {template.description}",
            value=template.key,
        )
        for template in store.templates()
    ]
    return _ask(questionary.select("Application language?", choices=choices))


def prompt_text(message: str, default: str = "") -> str:
    """Prompt for a non-empty line of text."""
    return _ask(questionary.text(
        message,
        default=default,
        validate=lambda value: bool(value.strip()) or "A value is required",
    ))


def prompt_option(option: TemplateOption) -> bool | str:
    """
    Prompt for a template option according to its type.

    Parameters
    ----------
    option : TemplateOption
        The option to ask about.

    Returns
    -------
    bool | str
        The chosen value.
    """
    message = option.description or option.name
    default = option.default_value

    if option.type == OptionType.BOOLEAN:
        return _ask(questionary.confirm(message, default=bool(default)))
    if option.type == OptionType.CHOICE:
        return _ask(questionary.select(message, choices=list(option.values), default=default))
    return _ask(questionary.text(message, default=str(default)))


def collect_app_settings(
    settings: dict[str, Any],
    template: Template,
) -> dict[str, Any]:
    """
    Prompt for every application setting that is still missing.

    Parameters
    ----------
    settings : dict[str, Any]
        Values gathered so far from flags and the config file.

    template : Template
        Selected template, whose options are prompted for.

    Returns
    -------
    dict[str, Any]
        ``settings`` completed with the prompted values.
    """
    if not settings.get("title"):
        settings["title"] = prompt_text("Application title:")
    if not settings.get("name"):
        settings["name"] = prompt_text(
            "Application name (single word):",
            default=default_name_from_title(settings["title"]),
        )
    if not settings.get("author"):
        settings["author"] = prompt_text("Author:")

    options = settings.setdefault("options", {})
    for option in template.options:
        if option.name not in options:
            options[option.name] = prompt_option(option)

    return settings


def parse_option_args(values: list[str]) -> dict[str, str]:
    """
    Parse repeated ``--option KEY=VALUE`` arguments.

    Raises
    ------
    typer.BadParameter
        If an argument has no ``=`` or an empty key.
    """
    options: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(
                f"Expected KEY=VALUE, got '{item}'",
                param_hint="--option",
            )
        options[key.strip()] = value.strip()
    return options


# =============================================================================
# Main Application Callback
# =============================================================================

@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging.",
        ),
    ] = False,
) -> None:
    """
    [bold]appseed[/] - Hello world application scaffolder.

    [bold]Quick Start:[/]

        appseed new ./demo

    [bold]Non-interactive:[/]

        appseed new ./demo --lang c --name demo --title "Demo" --author Jane --yes
    """
    configure_logging(verbose)


# =============================================================================
# New Command
# =============================================================================

@app.command()
def new(
    dest: Annotated[
        Path,
        typer.Argument(
            help="Directory to write the application into",
            file_okay=False,
        ),
    ],
    lang: Annotated[
        str | None,
        typer.Option(
            "--lang",
            "-l",
            help="Template to use: c, cpp, go",
        ),
    ] = None,
    name: Annotated[
        str | None,
        typer.Option(
            "--name",
            "-n",
            help="Application name (single word, used for file names)",
        ),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option(
            "--title",
            "-t",
            help="Application title",
        ),
    ] = None,
    author: Annotated[
        str | None,
        typer.Option(
            "--author",
            "-a",
            help="Application author",
        ),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option(
            "--description",
            "-d",
            help="Application description",
        ),
    ] = None,
    app_version: Annotated[
        str | None,
        typer.Option(
            "--app-version",
            help="Application version",
        ),
    ] = None,
    option: Annotated[
        list[str] | None,
        typer.Option(
            "--option",
            "-o",
            help="Template option as KEY=VALUE (repeatable)",
        ),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="TOML file with an [app] table of default settings",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    templates_dir: Annotated[
        list[Path] | None,
        typer.Option(
            "--templates-dir",
            help="Extra template directory (repeatable)",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip all prompts",
        ),
    ] = False,
) -> None:
    """
    Create a new hello world application.

    Values come from, in increasing priority: the [cyan]--config[/] file,
    command line flags, and interactive prompts for anything still missing.

    [bold]Examples:[/]

        # Interactive mode
        appseed new ./demo

        # C application with the libhlapi header
        appseed new ./demo -l c -n demo -t "Demo App" -a Jane -o include_libhlapi=true -y

        # Settings from a file
        appseed new ./demo --config app.toml --yes
    """
    try:
        store = TemplateStore(templates_dir or ())
    except ScaffoldError as e:
        print_error(e)
        raise typer.Exit(1)

    # Settings from the config file, overridden by flags
    settings: dict[str, Any] = {}
    if config_file:
        try:
            settings = load_app_settings(config_file)
        except (OSError, ValueError) as e:
            print_error(e)
            raise typer.Exit(1)

    flags = {
        "lang": lang,
        "name": name,
        "title": title,
        "author": author,
        "description": description,
        "version": app_version,
    }
    settings.update({key: value for key, value in flags.items() if value})

    file_options = settings.get("options") or {}
    if not isinstance(file_options, dict):
        print_error("[app.options] must be a table of option values")
        raise typer.Exit(1)
    settings["options"] = {**file_options, **parse_option_args(option or [])}

    # Resolve the template
    resolved_lang = settings.pop("lang", None)
    if not resolved_lang:
        if yes:
            valid = ", ".join(store.available())
            print_error(f"No template selected. Use --lang with one of: {valid}")
            raise typer.Exit(1)
        resolved_lang = prompt_lang(store)

    try:
        template = store.lookup(resolved_lang)
    except ScaffoldError as e:
        print_error(e)
        raise typer.Exit(1)

    if yes:
        if not settings.get("name") and settings.get("title"):
            settings["name"] = default_name_from_title(settings["title"])
    else:
        settings = collect_app_settings(settings, template)

    try:
        create_app(template.key, settings, dest, store=store, verbose=True)
    except ScaffoldError as e:
        print_error(e)
        raise typer.Exit(1)


# =============================================================================
# List Command
# =============================================================================

@app.command("list")
def list_templates(
    templates_dir: Annotated[
        list[Path] | None,
        typer.Option(
            "--templates-dir",
            help="Extra template directory (repeatable)",
        ),
    ] = None,
) -> None:
    """
    List available application templates and their options.

    [bold]Example:[/]

        appseed list
        appseed list --templates-dir ./my-templates
    """
    try:
        store = TemplateStore(templates_dir or ())
    except ScaffoldError as e:
        print_error(e)
        raise typer.Exit(1)

    table = Table(title="Available Templates", show_header=True)
    table.add_column("Language", style="cyan")
    table.add_column("Description")
    table.add_column("Output", style="green")
    table.add_column("Options", style="dim")

    for template in store.templates():
        options = ", ".join(
            f"{opt.name} ({opt.type.value}, default {opt.default_value})"
            for opt in template.options
        )
        table.add_row(template.key, template.description, template.file_pattern, options or "-")

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
