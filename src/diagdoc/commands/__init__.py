"""
diagdoc.commands - CLI command implementations
"""

__all__ = [
    "analyze",
    "completion",
    "deps",
    "fix_cmd",
    "links",
    "tree",
]
