"""
appseed - Hello World Application Scaffolder
============================================

A CLI tool that creates minimal "hello world" starter programs for C, C++
and Go from small source templates.

Features
--------
- **Tiny Templates**: One boilerplate source file per language
- **Familiar Markers**: ``{{.app.name}}`` placeholders and
  ``{{if .app.options.flag}} ... {{end}}`` conditional blocks
- **Template Options**: Per-template boolean, text and choice options
- **Custom Templates**: Layer your own template directories on top

Quick Start
-----------
```bash
# Install appseed
pip install appseed

# Create a new application interactively
appseed new ./demo

# Or with options
appseed new ./demo --lang c --name demo --title "Demo App" --author Jane --yes
```

Example
-------
>>> from appseed import RenderContext, create_app
>>> ctx = RenderContext(name="demo", title="Demo App", author="Jane")
>>> result = create_app("c", ctx, Path("demo"))
>>> result.output_path
PosixPath('demo/demo.c')

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``generator``: Scaffolding pipeline (lookup, validate, render, write)
- ``store``: Template lookup across package and user directories
- ``engine``: Placeholder substitution on top of Jinja2
- ``emitter``: Atomic file writing
- ``models``: Pydantic models for templates and render contexts
- ``errors``: Exception hierarchy
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from appseed.emitter import write_file
from appseed.engine import render
from appseed.errors import (
    DescriptorError,
    EmitError,
    ScaffoldError,
    TemplateConfigError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    UnresolvedReferenceError,
)
from appseed.generator import build_context, create_app
from appseed.models import RenderContext, RenderedFile, Template, TemplateOption
from appseed.store import TemplateStore


__all__ = [
    "DescriptorError",
    "EmitError",
    "RenderContext",
    "RenderedFile",
    "ScaffoldError",
    "Template",
    "TemplateConfigError",
    "TemplateNotFoundError",
    "TemplateOption",
    "TemplateStore",
    "TemplateSyntaxError",
    "UnresolvedReferenceError",
    "__version__",
    "build_context",
    "create_app",
    "render",
    "write_file",
]
