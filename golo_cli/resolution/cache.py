"""Content-addressed cache locations for pinned packages.

A scope such as "``github.com/acme`` pinned at revision ``abc123``" maps to
a fixed directory::

    <project root>/.golo/cache/<first digest byte>/<remaining digest bytes>

The one-byte shard keeps the cache root's fan-out at 256 entries.
"""

import hashlib
from pathlib import Path

from ..paths import get_cache_dir


def scope_key(prefix: str, kind: str, arg: str) -> str:
    """Build the scope string hashed into a cache path."""
    return f"{prefix}{kind}={arg}"


def cache_path(project_root: Path, key: str) -> Path:
    """Derive the cache directory for a scope key.

    Pure: the same key always yields the same path, and nothing is
    created on disk.
    """
    digest = hashlib.sha1(key.encode("utf-8")).digest()
    return get_cache_dir(project_root) / digest[:1].hex() / digest[1:].hex()
