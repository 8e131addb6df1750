"""
appseed.templates - Built-in Scaffolding Templates
==================================================

This package holds the templates shipped with appseed. Each subdirectory is
one template, named after its ecosystem key, and is read by
:class:`appseed.store.TemplateStore` through Jinja2's ``PackageLoader``.

Available Templates
-------------------
c:
    ``{{.app.name}}.c`` - prints the application title, optional
    ``include_libhlapi`` header.

cpp:
    ``{{.app.name}}.cpp`` - prints the application name.

go:
    ``main.go`` - prints the application name, optional
    ``use_libhlapi_module`` import.

Template Context
----------------
Bodies and file names address values under ``app``:

    .app.name, .app.title, .app.author, .app.description,
    .app.version, .app.lang, .app.options.<flag>

See Also
--------
- store.py: Loads these templates
- engine.py: Marker syntax and substitution rules
"""

# Templates are read as package data; nothing to import here.
