"""tree-urls: SHA1-keyed storage for visualization tree links, served over HTTP."""
from __future__ import annotations

__version__ = "2.9.0"
