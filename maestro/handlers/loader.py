"""Imports ``*_handler.py`` files and instantiates the handlers they define.

Handler files are plain modules, not part of an importable package, so each
one is loaded under a private module name derived from its path.  A file that
fails to import, or a class that fails to construct, is logged and skipped;
the remaining handlers still load.
"""

import hashlib
import importlib.util
import inspect
import sys
from pathlib import Path
from types import ModuleType

from maestro.handlers.base import BaseHandler, PromptHandler
from maestro.utils.logging import get_logger

logger = get_logger(__name__)

HANDLER_FILE_PATTERN = "*_handler.py"

_NAMESPACE = "_maestro_handlers"
_BASE_CLASSES = (BaseHandler, PromptHandler)


def _private_module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path.resolve()).encode("utf-8")).hexdigest()[:10]
    return f"{_NAMESPACE}.{path.stem}_{digest}"


def load_handlers_from_directory(directory: str | Path, **dependencies) -> list[BaseHandler]:
    """Instantiate every handler found in *directory*, in sorted file order.

    *dependencies* are passed as keyword arguments to each handler class.
    A missing directory yields no handlers.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.warning("handlers_directory_unavailable", path=str(directory))
        return []

    handlers: list[BaseHandler] = []
    for path in sorted(directory.glob(HANDLER_FILE_PATTERN)):
        handlers.extend(load_handlers_from_file(path, **dependencies))
    return handlers


def load_handlers_from_file(path: str | Path, **dependencies) -> list[BaseHandler]:
    path = Path(path)
    module = _import_file(path)
    if module is None:
        return []

    handlers: list[BaseHandler] = []
    for cls in _handler_classes(module):
        try:
            handler = cls(**dependencies)
        except Exception:
            logger.exception("handler_construction_failed", cls=cls.__name__, path=str(path))
            continue
        logger.info("handler_loaded", handler_name=handler.metadata.name, path=str(path))
        handlers.append(handler)
    return handlers


def _import_file(path: Path) -> ModuleType | None:
    name = _private_module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        logger.error("handler_file_not_importable", path=str(path))
        return None

    module = importlib.util.module_from_spec(spec)
    # Dataclasses and pydantic models in the file resolve their module here.
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(name, None)
        logger.exception("handler_file_import_failed", path=str(path))
        return None
    return module


def _handler_classes(module: ModuleType) -> list[type[BaseHandler]]:
    """Concrete handler classes defined in *module* itself, in name order."""
    return [
        cls
        for _, cls in inspect.getmembers(module, inspect.isclass)
        if issubclass(cls, BaseHandler)
        and cls not in _BASE_CLASSES
        and not inspect.isabstract(cls)
        and cls.__module__ == module.__name__
    ]
