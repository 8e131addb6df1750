"""
appseed.generator - Scaffolding Pipeline
========================================

This module ties the store, engine and emitter together. It is the entry
point used by the CLI and by library callers.

Architecture
------------
The generator follows a strictly linear pipeline:

    1. Look up the template for the requested ecosystem
    2. Build and validate the render context (options filled and coerced)
    3. Render the template body and file name
    4. Write the file to the output directory

The first failure aborts the pipeline and propagates to the caller; nothing
is retried. Validation happens before any file system access, so an invalid
descriptor never leaves files or directories behind.

Usage Example
-------------
>>> from appseed.generator import create_app
>>> result = create_app(
...     "c",
...     {"name": "demo", "title": "Demo App", "author": "Jane",
...      "options": {"include_libhlapi": True}},
...     Path("out"),
... )
>>> result.output_path
PosixPath('out/demo.c')
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from appseed.emitter import write_file
from appseed.engine import render
from appseed.errors import DescriptorError
from appseed.models import RenderContext, Template
from appseed.store import TemplateStore


logger = logging.getLogger(__name__)

# Console for rich output
console = Console()


# =============================================================================
# Result Data Classes
# =============================================================================


@dataclass
class GenerationResult:
    """
    Result of a scaffolding operation.

    Attributes
    ----------
    success : bool
        Whether the file was written.

    template : str
        Ecosystem key of the template used.

    output_path : Path | None
        Path of the written file.

    context : RenderContext | None
        The validated context the template was rendered with.

    warnings : list[str]
        Non-fatal issues, such as options the template doesn't declare.
    """

    success: bool
    template: str
    output_path: Path | None = None
    context: RenderContext | None = None
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Context Building
# =============================================================================


def format_validation_error(error: ValidationError) -> str:
    """Flatten a Pydantic validation error into one line, e.g. ``author: Field required``."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def build_context(
    template: Template,
    descriptor: RenderContext | Mapping[str, Any],
) -> tuple[RenderContext, list[str]]:
    """
    Build the render context for a template from caller-supplied values.

    Options declared by the template are coerced to their type, or filled
    from their defaults when omitted. Undeclared options are passed through
    unchanged and reported as warnings.

    Parameters
    ----------
    template : Template
        Template the context is built for.

    descriptor : RenderContext | Mapping[str, Any]
        Application values: ``name``, ``title``, ``author`` and optionally
        ``description``, ``version`` and ``options``.

    Returns
    -------
    tuple[RenderContext, list[str]]
        The validated context and any warnings.

    Raises
    ------
    DescriptorError
        If a required field is missing or empty, the name is not a single
        word, or an option value doesn't fit its declared type.
    """
    if isinstance(descriptor, RenderContext):
        data = descriptor.model_dump()
    else:
        data = dict(descriptor)

    raw_options = data.get("options") or {}
    if not isinstance(raw_options, Mapping):
        raise DescriptorError("options: must be a mapping of option names to values")
    raw_options = dict(raw_options)

    options: dict[str, Any] = {}
    warnings: list[str] = []

    for option in template.options:
        if option.name in raw_options:
            try:
                options[option.name] = option.coerce(raw_options.pop(option.name))
            except ValueError as e:
                raise DescriptorError(str(e)) from e
        else:
            options[option.name] = option.default_value

    for name, value in raw_options.items():
        warnings.append(f"Option '{name}' is not used by template '{template.key}'")
        options[name] = value

    data["options"] = options

    try:
        context = RenderContext(**data)
    except ValidationError as e:
        raise DescriptorError(format_validation_error(e)) from e

    return context, warnings


# =============================================================================
# Main Generation Function
# =============================================================================


def create_app(
    lang: str,
    descriptor: RenderContext | Mapping[str, Any],
    output_dir: Path,
    *,
    store: TemplateStore | None = None,
    verbose: bool = False,
) -> GenerationResult:
    """
    Scaffold a new application from the template for ``lang``.

    Parameters
    ----------
    lang : str
        Ecosystem key (``"c"``, ``"cpp"``, ``"go"``).

    descriptor : RenderContext | Mapping[str, Any]
        Application values, see :func:`build_context`.

    output_dir : Path
        Directory the rendered file is written to. Created if needed.

    store : TemplateStore | None
        Template store to use; defaults to the built-in templates.

    verbose : bool, default=False
        If True, display progress information on the console.

    Returns
    -------
    GenerationResult
        Details of the written file.

    Raises
    ------
    TemplateNotFoundError
        If ``lang`` has no template.
    DescriptorError
        If the descriptor is invalid. Raised before anything is written.
    UnresolvedReferenceError, TemplateSyntaxError
        If the template itself is broken.
    EmitError
        If the file can't be written.
    """
    if store is None:
        store = TemplateStore()

    template = store.lookup(lang)
    context, warnings = build_context(template, descriptor)

    if verbose:
        console.print()
        console.print(
            Panel(
                f"[bold blue]Creating application:[/] [green]{context.name}[/]\n"
                f"[dim]Template: {template.key} | Author: {context.author}[/]",
                title="[bold]appseed[/]",
                border_style="blue",
            )
        )
        for warning in warnings:
            console.print(f"  [yellow]⚠[/] {warning}")

    rendered = render(template, context)
    output_path = write_file(rendered, output_dir)
    logger.info("Generated '%s' application at %s", template.key, output_path)

    if verbose:
        console.print(f"  Created {output_path}")
        console.print()
        console.print(
            Panel(
                f"[bold green]✨ Generated a new {template.key} application![/]\n\n"
                f"[dim]Location:[/] {output_path}",
                title="[bold green]Success[/]",
                border_style="green",
            )
        )

    return GenerationResult(
        success=True,
        template=template.key,
        output_path=output_path,
        context=context,
        warnings=warnings,
    )
