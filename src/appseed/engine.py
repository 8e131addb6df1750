"""
appseed.engine - Placeholder Substitution
=========================================

Templates use a small Go-template-like marker syntax:

    {{.app.name}}                            value substitution
    {{ .app.author }}                        whitespace tolerant
    {{if .app.options.flag}} ... {{end}}     conditional block
    {{if .app.options.flag}} a {{else}} b {{end}}

Rather than writing a second template language, markers are translated
into Jinja2 syntax and rendered with a strict Jinja2 environment:

    {{.app.options.flag}}   ->  {{ app['options']['flag'] }}
    {{if .app.x}}           ->  {% if app['x'] %}
    {{else}} / {{end}}      ->  {% else %} / {% endif %}

Literal text between markers is emitted as an escaped Jinja2 string
constant, ``int a;\\r\\n`` -> ``{{ "int a;\\r\\n" }}``. Jinja2 never sees
it as template data, so text that looks like Jinja2 syntax (``{%``,
``{% endraw %}``) survives untouched and line endings are not normalized.

Output matches the template byte for byte outside the markers. A removed
block leaves nothing behind, not even its markers.

Every referenced path is checked against the context before rendering,
including paths inside blocks that end up removed, so a template that
references an unknown field fails regardless of option values.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any

import jinja2
from jinja2 import Environment, StrictUndefined

from appseed.errors import DescriptorError, TemplateSyntaxError, UnresolvedReferenceError
from appseed.models import RenderContext, RenderedFile, Template


logger = logging.getLogger(__name__)

# =============================================================================
# Marker Grammar
# =============================================================================

_ACTION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
_PATH = r"\.([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)"
_VALUE = re.compile(rf"^{_PATH}$")
_IF = re.compile(rf"^if\s+{_PATH}$")
_SEPARATORS = re.compile(r"[\\/]")


# =============================================================================
# Template Environment
# =============================================================================


def _finalize(value: Any) -> Any:
    # Booleans print the way the marker syntax expects
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


def create_jinja_env() -> Environment:
    """
    Create the Jinja2 environment used to render translated templates.

    The environment is configured with:
    - StrictUndefined so a missing value is an error, never an empty string
    - Autoescaping disabled (we're generating source code, not HTML).
      Templates come from ``from_string``, so ``select_autoescape`` would
      fall back to escaping; it is switched off explicitly.
    - No block trimming and trailing newlines kept

    Returns
    -------
    Environment
        Configured Jinja2 environment.
    """
    return Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        finalize=_finalize,
    )


_env = create_jinja_env()


# =============================================================================
# Translation
# =============================================================================


def _path_expression(path: str) -> str:
    root, *rest = path.split(".")
    return root + "".join(f"[{segment!r}]" for segment in rest)


def _literal(text: str, name: str | None) -> str:
    if "{{" in text:
        raise TemplateSyntaxError("unclosed action '{{'", name)
    if not text:
        return ""
    # Jinja2 decodes string constants with unicode-escape
    escaped = text.encode("unicode_escape").decode("ascii").replace('"', '\\"')
    return '{{ "' + escaped + '" }}'


def translate(text: str, name: str | None = None) -> tuple[str, list[str]]:
    """
    Translate marker syntax into Jinja2 source.

    Parameters
    ----------
    text : str
        Template text using ``{{.path}}`` markers.

    name : str | None
        Template name used in error messages.

    Returns
    -------
    tuple[str, list[str]]
        The Jinja2 source and the referenced paths (without leading dot),
        in order of appearance.

    Raises
    ------
    TemplateSyntaxError
        On unknown actions, nested or unbalanced blocks, or an unclosed
        ``{{``.

    Examples
    --------
    >>> translate("Hi {{ .app.name }}")
    ('{{ "Hi " }}{{ app[\'name\'] }}', ['app.name'])
    """
    parts: list[str] = []
    references: list[str] = []
    in_block = False
    seen_else = False
    position = 0

    for match in _ACTION.finditer(text):
        parts.append(_literal(text[position:match.start()], name))
        position = match.end()
        action = match.group(1).strip()

        value = _VALUE.match(action)
        if value:
            references.append(value.group(1))
            parts.append("{{ " + _path_expression(value.group(1)) + " }}")
            continue

        condition = _IF.match(action)
        if condition:
            if in_block:
                raise TemplateSyntaxError("nested {{if}} blocks are not supported", name)
            in_block, seen_else = True, False
            references.append(condition.group(1))
            parts.append("{% if " + _path_expression(condition.group(1)) + " %}")
        elif action == "else":
            if not in_block or seen_else:
                raise TemplateSyntaxError("unexpected {{else}}", name)
            seen_else = True
            parts.append("{% else %}")
        elif action == "end":
            if not in_block:
                raise TemplateSyntaxError("unexpected {{end}}", name)
            in_block = False
            parts.append("{% endif %}")
        else:
            raise TemplateSyntaxError(f"unsupported action '{{{{{action}}}}}'", name)

    if in_block:
        raise TemplateSyntaxError("unclosed {{if}} block", name)

    parts.append(_literal(text[position:], name))
    return "".join(parts), references


def _check_reference(context: dict[str, Any], path: str, name: str | None) -> None:
    current: Any = context
    for segment in path.split("."):
        if not isinstance(current, dict) or segment not in current:
            raise UnresolvedReferenceError(path, name)
        current = current[segment]


# =============================================================================
# Rendering
# =============================================================================


def render_string(text: str, context: dict[str, Any], name: str | None = None) -> str:
    """
    Render marker-syntax text against a plain mapping.

    Parameters
    ----------
    text : str
        Template text.

    context : dict[str, Any]
        Values addressed by the markers, e.g. ``{"app": {...}}``.

    name : str | None
        Template name for error messages.

    Returns
    -------
    str
        Text with every marker substituted or removed.

    Raises
    ------
    TemplateSyntaxError
        If the markers are malformed.
    UnresolvedReferenceError
        If a marker addresses a path missing from ``context``.
    """
    source, references = translate(text, name)
    for path in references:
        _check_reference(context, path, name)

    try:
        return _env.from_string(source).render(context)
    except jinja2.UndefinedError as e:
        raise UnresolvedReferenceError(str(e), name) from e
    except jinja2.TemplateSyntaxError as e:
        raise TemplateSyntaxError(e.message or str(e), name) from e


def _output_path(rendered: str, template: Template) -> Path:
    # Both separators count, so ..\x cannot escape on Windows
    parts = _SEPARATORS.split(rendered)
    if (
        not rendered
        or PurePosixPath(rendered).is_absolute()
        or PureWindowsPath(rendered).anchor
    ):
        msg = f"Template '{template.key}' produced an invalid file name '{rendered}'"
        raise DescriptorError(msg)
    if any(not part.strip() or part == ".." for part in parts):
        msg = (
            f"Template '{template.key}' produced file name '{rendered}' "
            "with an empty or parent directory component"
        )
        raise DescriptorError(msg)
    return Path(rendered)


def render(template: Template, context: RenderContext) -> RenderedFile:
    """
    Render a template against an application descriptor.

    Both the body and the file-name pattern are substituted. The result is
    deterministic: the same inputs always produce byte-identical output.

    Parameters
    ----------
    template : Template
        Template to render.

    context : RenderContext
        Validated application descriptor.

    Returns
    -------
    RenderedFile
        Relative output path and rendered content.

    Raises
    ------
    TemplateSyntaxError
        If the template markers are malformed.
    UnresolvedReferenceError
        If the template references a field the context does not have.
    DescriptorError
        If the rendered file name is empty or escapes the output directory.
    """
    values = context.as_template_context(template.key)
    logger.debug("Rendering template '%s' for '%s'", template.key, context.name)

    content = render_string(template.body, values, name=template.key)
    file_name = render_string(template.file_pattern, values, name=f"{template.key} (file name)")

    return RenderedFile(path=_output_path(file_name, template), content=content)
