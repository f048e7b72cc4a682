"""
Catalog loading utilities.

Loads the bundled tool table (tools.yaml) into a ToolRegistry.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..registry import ToolRegistry

CATALOG_DIR = Path(__file__).parent
DEFAULT_CATALOG = CATALOG_DIR / "tools.yaml"


@lru_cache(maxsize=None)
def load_default_registry() -> ToolRegistry:
    """
    Load the bundled Financial Datasets tool table.

    The registry is immutable, so one instance is shared per process.
    """
    return ToolRegistry.from_yaml(DEFAULT_CATALOG)
