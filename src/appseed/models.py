"""
appseed.models - Pydantic Models for Templates and Render Contexts
==================================================================

This module defines the data models used throughout appseed. Pydantic gives
us validation with readable error messages, immutability via frozen models,
and painless loading from TOML.

Architecture Notes
------------------
The models are organized as follows:

    Template (frozen)
    ├── key: str                       ecosystem key ("c", "cpp", "go")
    ├── file_pattern: str              e.g. "{{.app.name}}.c"
    ├── body: str
    └── options: tuple[TemplateOption]
        ├── type: OptionType (boolean | text | choice)
        ├── default
        └── values                     allowed values for choice options

    RenderContext (frozen)
    ├── name / title / author          required, non-empty
    ├── description / version
    └── options: dict[str, bool | str]

    RenderedFile                       relative path + content

Usage Example
-------------
>>> from appseed.models import RenderContext
>>> ctx = RenderContext(name="demo", title="Demo App", author="Jane")
>>> ctx.as_template_context("c")["app"]["title"]
'Demo App'
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Single word: no whitespace, no path separators, no leading dot
NAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.+-]*$")

TRUE_STRINGS = frozenset({"1", "t", "true"})
FALSE_STRINGS = frozenset({"0", "f", "false"})


# =============================================================================
# Enumerations
# =============================================================================

class OptionType(str, Enum):
    """
    Kinds of template-specific options.

    Attributes
    ----------
    BOOLEAN : str
        A flag, usually driving an ``{{if}}`` block.

    TEXT : str
        Free-form text substituted verbatim.

    CHOICE : str
        One value out of a fixed list.
    """

    BOOLEAN = "boolean"
    TEXT = "text"
    CHOICE = "choice"


def parse_bool(value: str) -> bool:
    """
    Parse a boolean from its textual form.

    Accepts ``1``/``t``/``true`` and ``0``/``f``/``false`` in any case.

    Raises
    ------
    ValueError
        If the string is not a recognized boolean.
    """
    lowered = value.strip().lower()
    if lowered in TRUE_STRINGS:
        return True
    if lowered in FALSE_STRINGS:
        return False
    msg = f"Invalid boolean value '{value}'"
    raise ValueError(msg)


# =============================================================================
# Template Models
# =============================================================================

class TemplateOption(BaseModel):
    """
    An option declared by a template in its ``template.toml``.

    Options give templates a small amount of variability (for example
    including an extra header). Values supplied by the user are coerced
    to the option's type with :meth:`coerce`; omitted options fall back to
    :attr:`default_value`.

    Attributes
    ----------
    name : str
        Key under ``app.options`` in the render context.

    description : str
        Prompt text shown by the CLI.

    type : OptionType
        Value kind.

    default : bool | str | None
        Default value; a type-appropriate default is used when omitted.

    values : list[str]
        Allowed values for choice options.

    Examples
    --------
    >>> opt = TemplateOption(name="include_libhlapi", type="boolean")
    >>> opt.coerce("true")
    True
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Option key")
    description: str = Field(default="", description="Human readable prompt")
    type: OptionType = Field(default=OptionType.BOOLEAN, description="Option type")
    default: bool | str | None = Field(default=None, description="Default value")
    values: tuple[str, ...] = Field(default=(), description="Allowed choice values")

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: Any) -> Any:
        """Accept option types in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def validate_default(self) -> TemplateOption:
        """Check that the default value matches the option type."""
        if self.type == OptionType.CHOICE and not self.values:
            msg = f"Choice option '{self.name}' must list its values"
            raise ValueError(msg)
        if self.default is not None:
            # Raises ValueError on mismatch
            self.coerce(self.default)
        return self

    @property
    def default_value(self) -> bool | str:
        """The value used when the user does not supply one."""
        if self.default is not None:
            return self.coerce(self.default)
        if self.type == OptionType.BOOLEAN:
            return False
        if self.type == OptionType.CHOICE:
            return self.values[0]
        return ""

    def coerce(self, value: Any) -> bool | str:
        """
        Convert a user-supplied value to this option's type.

        Parameters
        ----------
        value : Any
            Raw value from the command line, a config file or the API.

        Returns
        -------
        bool | str
            The typed value.

        Raises
        ------
        ValueError
            If the value cannot be converted or is not an allowed choice.
        """
        if self.type == OptionType.BOOLEAN:
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                try:
                    return parse_bool(value)
                except ValueError:
                    msg = f"Option '{self.name}' expects a boolean, got '{value}'"
                    raise ValueError(msg) from None
            msg = f"Option '{self.name}' expects a boolean, got {type(value).__name__}"
            raise ValueError(msg)

        text = value if isinstance(value, str) else str(value)
        if self.type == OptionType.CHOICE and text not in self.values:
            msg = (
                f"Option '{self.name}' must be one of {', '.join(self.values)}; "
                f"got '{text}'"
            )
            raise ValueError(msg)
        return text


class Template(BaseModel):
    """
    A scaffolding template for one ecosystem.

    Templates are loaded once by :class:`~appseed.store.TemplateStore` and
    never mutated afterwards.

    Attributes
    ----------
    key : str
        Ecosystem key used for lookup (``"c"``, ``"cpp"``, ``"go"``).

    description : str
        One-line description for listings.

    file_pattern : str
        Output file name; may contain placeholders.

    body : str
        Template text with placeholder markers.

    options : tuple[TemplateOption, ...]
        Options the template understands.

    origin : str
        Where the template was loaded from, for error messages.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    description: str = ""
    file_pattern: str = Field(min_length=1)
    body: str
    options: tuple[TemplateOption, ...] = ()
    origin: str = ""

    def get_option(self, name: str) -> TemplateOption | None:
        """Return the declared option called ``name``, if any."""
        for option in self.options:
            if option.name == name:
                return option
        return None


# =============================================================================
# Render Context
# =============================================================================

class RenderContext(BaseModel):
    """
    Application descriptor that templates are rendered against.

    Attributes
    ----------
    name : str
        Single-word identifier; becomes the output file name for most
        templates.

    title : str
        Human readable application title (may contain spaces).

    author : str
        Application author.

    description : str
        Optional longer description.

    version : str
        Application version.

    options : dict[str, bool | str]
        Template-specific options, e.g. ``{"include_libhlapi": True}``.

    Examples
    --------
    >>> RenderContext(name="demo", title="Demo App", author="")
    Traceback (most recent call last):
    ...
    pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(frozen=True)

    name: Annotated[str, Field(description="Application name", max_length=100)]
    title: Annotated[str, Field(description="Application title", max_length=200)]
    author: Annotated[str, Field(description="Application author", max_length=100)]
    description: str = Field(default="", description="Application description")
    version: str = Field(default="0.1.0", description="Application version")
    options: dict[str, bool | str] = Field(
        default_factory=dict,
        description="Template specific options",
    )

    @field_validator("name", "title", "author")
    @classmethod
    def require_non_empty(cls, v: str) -> str:
        """Strip whitespace and reject empty values."""
        v = v.strip()
        if not v:
            msg = "must not be empty"
            raise ValueError(msg)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """
        Ensure the name is a single word usable as a file name.

        Raises
        ------
        ValueError
            If the name contains spaces, path separators or starts with a dot.
        """
        if not NAME_PATTERN.match(v):
            msg = (
                f"Invalid application name '{v}'. Names must be a single word "
                "of letters, digits, '_', '-', '.' or '+' and cannot contain spaces."
            )
            raise ValueError(msg)
        return v

    def as_template_context(self, lang: str) -> dict[str, Any]:
        """
        Build the mapping templates see, rooted at ``app``.

        Parameters
        ----------
        lang : str
            Ecosystem key of the template being rendered.

        Returns
        -------
        dict[str, Any]
            ``{"app": {...}}`` with plain values only.
        """
        return {
            "app": {
                "lang": lang,
                "name": self.name,
                "title": self.title,
                "author": self.author,
                "description": self.description,
                "version": self.version,
                "options": dict(self.options),
            }
        }

    @classmethod
    def from_toml(cls, path: Path) -> RenderContext:
        """
        Load a descriptor from the ``[app]`` table of a TOML file.

        Raises
        ------
        FileNotFoundError
            If the file doesn't exist.
        ValueError
            If the file has no ``[app]`` table or invalid values.
        """
        return cls(**load_app_settings(path))


def default_name_from_title(title: str) -> str:
    """
    Derive an application name from its title.

    >>> default_name_from_title("Demo App")
    'demo_app'
    """
    return "_".join(title.lower().split())


def load_app_settings(path: Path) -> dict[str, Any]:
    """
    Read the raw ``[app]`` table of a TOML configuration file.

    The result may be incomplete; the CLI merges it with flags and prompts
    before validation.

    Raises
    ------
    FileNotFoundError
        If the file doesn't exist.
    ValueError
        If the TOML is invalid or has no ``[app]`` table.
    """
    import tomli

    with open(path, "rb") as f:
        try:
            data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            msg = f"Invalid configuration file {path}: {e}"
            raise ValueError(msg) from e

    app = data.get("app")
    if not isinstance(app, dict):
        msg = f"Configuration file {path} has no [app] table"
        raise ValueError(msg)
    return dict(app)


class RenderedFile(BaseModel):
    """
    Output of the substitution engine.

    Attributes
    ----------
    path : Path
        Path relative to the output directory.

    content : str
        Fully substituted file content.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    content: str
