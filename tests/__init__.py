"""
appseed test suite
==================

This package contains tests for appseed.

Test Modules
------------
- test_models.py: Tests for Pydantic models and option coercion
- test_engine.py: Tests for marker translation and rendering
- test_store.py: Tests for template lookup
- test_emitter.py: Tests for file writing
- test_generator.py: Tests for the scaffolding pipeline
- test_cli.py: Tests for the command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=src/appseed

    # Run specific test class
    pytest tests/test_engine.py::TestConditionalBlocks
"""
