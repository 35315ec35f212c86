"""
Container and dispatcher inspection.

Loads an application from an import reference and reports its bindings,
instances, aliases and listeners.
"""

import importlib
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ...container.errors import describe
from ...foundation.application import Application


def load_application(reference: str) -> Application:
    """
    Load an application from ``package.module:attribute``.

    The attribute is either an Application or a zero-argument callable
    returning one. The working directory is importable.
    """
    module_path, _, attr = reference.partition(":")
    if not module_path or not attr:
        raise ValueError(f"Invalid application reference '{reference}' (expected module:attribute)")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    module = importlib.import_module(module_path)
    target = getattr(module, attr, None)
    if target is None:
        raise ValueError(f"Module '{module_path}' has no attribute '{attr}'")

    app = target if isinstance(target, Application) else target()
    if not isinstance(app, Application):
        raise ValueError(f"'{reference}' did not produce an Application (got {type(app).__name__})")
    return app


def _label(value: Any) -> str:
    if isinstance(value, type) or isinstance(value, str):
        return describe(value)
    name = getattr(value, "__qualname__", None)
    if name:
        return f"{getattr(value, '__module__', '')}.{name}".lstrip(".")
    return type(value).__name__


def describe_container(app: Application) -> List[Tuple[str, str, str, str]]:
    """Rows of (abstract, kind, shared, target) sorted by abstract."""
    rows = []
    for abstract, binding in app.get_bindings().items():
        rows.append((
            describe(abstract),
            binding.kind,
            "yes" if binding.shared else "no",
            _label(binding.concrete),
        ))
    for abstract, value in app.get_instances().items():
        rows.append((describe(abstract), "instance", "yes", type(value).__name__))
    for alias, abstract in app.get_aliases().items():
        rows.append((describe(alias), "alias", "-", describe(abstract)))
    return sorted(rows, key=lambda row: row[0])


def describe_listeners(app: Application, event: Optional[str] = None) -> List[Tuple[str, str]]:
    """Rows of (event, listener), optionally limited to listeners for ``event``."""
    events = app.make("events")
    if event is not None:
        return [(event, _label(listener)) for listener in events.get_listeners(event)]

    rows = []
    for name, listeners in sorted(events.get_raw_listeners().items()):
        for listener in listeners:
            rows.append((name, _label(listener)))
    return rows
