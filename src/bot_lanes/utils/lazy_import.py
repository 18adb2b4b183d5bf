"""Deferred imports for optional backends.

The Mongo client resolves motor only when a connection is first
opened, so repositories built around an in-memory test client never
load the async driver.
"""

from collections.abc import Callable
from functools import cache
from importlib import import_module

__all__ = [
    "lazy_import",
]


def lazy_import(
    module_name: str,
    name: str | None = None,
) -> Callable[[], object]:
    """Return a loader for a module, or for one attribute of it.

    The loader imports on its first call and returns the same object
    afterwards.

    Args:
        module_name: Dotted module path
        name: Attribute to fetch from the module (whole module if None)

    Raises:
        ImportError: From the loader, naming what was being resolved
    """

    @cache
    def _load() -> object:
        try:
            module = import_module(module_name)
        except ImportError as e:
            target = f"{module_name}.{name}" if name else module_name
            raise ImportError(f"cannot load {target}: {e}") from e
        return getattr(module, name) if name else module

    return _load
