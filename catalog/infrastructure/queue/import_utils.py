"""
===============================================================================
SUBSYSTEM: Infrastructure / Queue
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Helpers de import seguro

Responsibilities:
    - Verificar que un dotted path ("module.attr") sea importable y callable.
    - Fallar al arrancar en vez de descubrir un path roto en el worker.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module


@lru_cache(maxsize=128)
def is_importable_dotted_path(dotted_path: str) -> bool:
    """True si dotted_path ("module.func") importa, existe y es callable."""
    try:
        module_name, attr_name = _split_dotted_path(dotted_path)
        module = import_module(module_name)
        attr = getattr(module, attr_name)
        return callable(attr)
    except (ModuleNotFoundError, AttributeError):
        return False


def _split_dotted_path(dotted_path: str) -> tuple[str, str]:
    if not dotted_path or "." not in dotted_path:
        raise ValueError("dotted_path must be 'module.attribute'")
    module_name, attr_name = dotted_path.rsplit(".", 1)
    if not module_name or not attr_name:
        raise ValueError("invalid dotted_path")
    return module_name, attr_name
