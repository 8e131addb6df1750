"""
pytest configuration and shared fixtures for appseed tests.

Fixtures
--------
demo_context : RenderContext
    The "Demo App" descriptor used across the suite.

make_template_dir : Callable
    Factory writing a template directory under a temporary root.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from appseed.models import RenderContext, Template, TemplateOption
from appseed.store import TemplateStore


@pytest.fixture
def demo_context() -> RenderContext:
    """Descriptor for the demo application with the libhlapi header."""
    return RenderContext(
        name="demo",
        title="Demo App",
        author="Jane",
        options={"include_libhlapi": True},
    )


@pytest.fixture
def simple_template() -> Template:
    """A small template exercising values and a conditional block."""
    return Template(
        key="txt",
        file_pattern="{{.app.name}}.txt",
        body=(
            "{{ .app.title }} by {{.app.author}}\n"
            "{{if .app.options.greet}}Hello!\n{{end}}"
            "bye\n"
        ),
        options=(TemplateOption(name="greet", type="boolean", default=False),),
    )


@pytest.fixture
def store() -> TemplateStore:
    """Store with only the built-in templates."""
    return TemplateStore()


@pytest.fixture
def make_template_dir(tmp_path: Path) -> Callable[..., Path]:
    """
    Return a factory that writes ``<root>/<key>/template.toml`` and a body.

    The factory returns the template root, suitable for ``extra_dirs``.
    """
    root = tmp_path / "templates"

    def factory(key: str, metadata: str, body: str | None = None, source: str = "body.tmpl") -> Path:
        template_dir = root / key
        template_dir.mkdir(parents=True, exist_ok=True)
        (template_dir / "template.toml").write_text(metadata, encoding="utf-8")
        if body is not None:
            (template_dir / source).write_text(body, encoding="utf-8")
        return root

    return factory


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks end-to-end tests that write files"
    )
