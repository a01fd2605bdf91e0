"""
diagdoc.config.defaults - Default configuration values.
"""

DEFAULT_CONFIG = {
    "directories": {
        "docs": "docs",
    },
    "scan": {
        "skip_dirs": ["node_modules", ".git", "__pycache__"],
        "skip_files": [],
        "include_hidden": False,
    },
    "links": {
        "skip_code_blocks": True,
        "include_external": False,
        "check_filesystem": True,
    },
    "hierarchy": {
        "infer_parents": True,
    },
    "cycles": {
        "canonicalize": False,
    },
}
