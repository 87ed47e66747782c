# tests/test_installation.py
#!/usr/bin/env python
"""Basic import tests for DarkLens core dependencies and package."""

import importlib


def _can_import(module_name: str) -> bool:
    """Return True if the given module can be imported, False otherwise."""
    try:
        importlib.import_module(module_name)
        return True
    except Exception:
        return False


def test_core_dependency_imports():
    """Core dependencies should import successfully in the test environment."""
    core_modules = [
        "numpy",
        "scipy",
        "matplotlib",
        "yaml",
    ]
    failures = [name for name in core_modules if not _can_import(name)]
    assert not failures, f"Failed to import core modules: {', '.join(failures)}"


def test_darklens_package_importable():
    """The darklens package and pipeline module should be importable."""
    assert _can_import("darklens")
    assert _can_import("darklens.lensing")
    assert _can_import("darklens.compositing")
    assert _can_import("darklens.pipeline")
