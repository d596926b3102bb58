"""Import path resolution: resolver chain, cache paths and the dependency walk.

Resolution order for an import path (first match wins):
1. Pinned prefixes (.golo/settings.yaml ``pins``), served from the cache
2. Standard library root ($GOROOT/src)
3. Project vendor directory (vendor/)
"""

from .cache import cache_path
from .cache import scope_key
from .dependencies import DependencyResolver
from .dependencies import resolve
from .resolvers import PackageResolver
from .resolvers import PinnedCacheResolver
from .resolvers import ResolverChain
from .resolvers import StandardLibraryResolver
from .resolvers import VendorResolver
from .resolvers import register
from .resolvers import standard_chain

__all__ = [
    "DependencyResolver",
    "PackageResolver",
    "PinnedCacheResolver",
    "ResolverChain",
    "StandardLibraryResolver",
    "VendorResolver",
    "cache_path",
    "register",
    "resolve",
    "scope_key",
    "standard_chain",
]
