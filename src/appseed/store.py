"""
appseed.store - Template Lookup
===============================

A :class:`TemplateStore` maps ecosystem keys (``"c"``, ``"cpp"``, ``"go"``)
to loaded :class:`~appseed.models.Template` objects.

Template Layout
---------------
Each template is a directory named after its key:

    c/
    ├── template.toml     metadata
    └── main.c.tmpl       body

``template.toml`` looks like:

    description = "Hello world application in C"
    file = "{{.app.name}}.c"      # output file name, may use placeholders
    source = "main.c.tmpl"        # body file, relative to the directory

    [[options]]
    name = "include_libhlapi"
    description = "Include the libhlapi header?"
    type = "boolean"
    default = false

Built-in templates ship in ``appseed/templates`` and are read through
Jinja2's ``PackageLoader``; extra directories are read through
``FileSystemLoader`` and take precedence on key clashes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

import jinja2
import tomli
from jinja2 import BaseLoader, Environment, FileSystemLoader, PackageLoader
from pydantic import ValidationError

from appseed.errors import TemplateConfigError, TemplateNotFoundError
from appseed.models import Template, TemplateOption


logger = logging.getLogger(__name__)

METADATA_FILE = "template.toml"


class VerbatimFileSystemLoader(FileSystemLoader):
    """``FileSystemLoader`` that keeps line endings exactly as they are on disk."""

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str, Callable[[], bool]]:
        # The base class reads in text mode, which turns CRLF into LF
        _, filename, uptodate = super().get_source(environment, template)
        return Path(filename).read_bytes().decode(self.encoding), filename, uptodate


def _template_key(name: str) -> str | None:
    """Return the key for a ``<key>/template.toml`` loader entry."""
    parts = name.split("/")
    if len(parts) == 2 and parts[1] == METADATA_FILE:
        return parts[0]
    return None


class TemplateStore:
    """
    Read-only registry of scaffolding templates.

    All templates are loaded when the store is created; afterwards the
    store is never mutated and can be shared freely.

    Parameters
    ----------
    extra_dirs : Iterable[Path]
        Additional template directories. Earlier directories win over later
        ones, and all of them win over the built-in templates. Directories
        that don't exist are ignored.

    include_builtin : bool, default=True
        Whether to load the templates shipped with appseed.

    Raises
    ------
    TemplateConfigError
        If a template's metadata is missing fields or malformed.

    Examples
    --------
    >>> store = TemplateStore()
    >>> store.available()
    ['c', 'cpp', 'go']
    >>> store.lookup("c").file_pattern
    '{{.app.name}}.c'
    """

    def __init__(
        self,
        extra_dirs: Iterable[Path] = (),
        *,
        include_builtin: bool = True,
    ) -> None:
        loaders: list[BaseLoader] = [VerbatimFileSystemLoader(str(d)) for d in extra_dirs]
        if include_builtin:
            loaders.append(PackageLoader("appseed", "templates"))

        self._env = Environment()
        self._templates: dict[str, Template] = {}

        # Lowest priority first so higher priority loaders overwrite
        for loader in reversed(loaders):
            for name in loader.list_templates():
                key = _template_key(name)
                if key is not None:
                    self._templates[key] = self._load(loader, key)

        logger.debug("Loaded templates: %s", ", ".join(self.available()) or "none")

    def _load(self, loader: BaseLoader, key: str) -> Template:
        metadata_name = f"{key}/{METADATA_FILE}"
        source, filename, _ = loader.get_source(self._env, metadata_name)
        origin = filename or metadata_name

        try:
            metadata = tomli.loads(source)
        except tomli.TOMLDecodeError as e:
            raise TemplateConfigError(f"Invalid {origin}: {e}") from e

        missing = [field for field in ("file", "source") if not metadata.get(field)]
        if missing:
            raise TemplateConfigError(f"{origin} is missing: {', '.join(missing)}")

        try:
            body, _, _ = loader.get_source(self._env, f"{key}/{metadata['source']}")
        except jinja2.TemplateNotFound as e:
            raise TemplateConfigError(
                f"{origin} references missing source file '{metadata['source']}'"
            ) from e

        try:
            options = tuple(TemplateOption(**option) for option in metadata.get("options", []))
            template = Template(
                key=key,
                description=metadata.get("description", ""),
                file_pattern=metadata["file"],
                body=body,
                options=options,
                origin=origin,
            )
        except (TypeError, ValidationError) as e:
            raise TemplateConfigError(f"Invalid {origin}: {e}") from e

        logger.debug("Loaded template '%s' from %s", key, origin)
        return template

    def available(self) -> list[str]:
        """
        List registered ecosystem keys.

        Returns
        -------
        list[str]
            Sorted template keys.
        """
        return sorted(self._templates)

    def templates(self) -> list[Template]:
        """All registered templates, sorted by key."""
        return [self._templates[key] for key in self.available()]

    def lookup(self, key: str) -> Template:
        """
        Return the template registered for an ecosystem key.

        Parameters
        ----------
        key : str
            Ecosystem key such as ``"c"``.

        Returns
        -------
        Template
            The registered template.

        Raises
        ------
        TemplateNotFoundError
            If no template is registered for ``key``.
        """
        try:
            return self._templates[key]
        except KeyError:
            raise TemplateNotFoundError(key, self.available()) from None

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._templates)
