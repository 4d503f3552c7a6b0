"""
Base path utilities for sub-path deployments.

The frontend can be served from a sub-path (e.g. /console/)
instead of the root. The same helpers the frontend uses at runtime are needed
server-side to mount the provider and to render the injected base path.
"""


def normalize_base_path(prefix: str) -> str:
    """Return the prefix with a trailing slash, "/" for an empty prefix"""
    if not prefix:
        return "/"
    if not prefix.endswith("/"):
        prefix = prefix + "/"
    return prefix


def router_prefix(prefix: str) -> str:
    """
    Prefix suitable for a router mount: no trailing slash,
    empty string for the root path
    """
    base_path = normalize_base_path(prefix)
    if base_path == "/":
        return ""
    return base_path[:-1]
