"""
diagdoc.commands.completion - Shell tab-completion setup.

Prints the argcomplete activation line for a shell, or appends it to the
shell's rc file with ``--install``.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

SHELLS = ("bash", "zsh", "fish", "tcsh")
MARKER = "# diagdoc shell completion"

ACTIVATION_LINES = {
    "bash": 'eval "$(register-python-argcomplete diagdoc)"',
    "zsh": 'eval "$(register-python-argcomplete diagdoc)"',
    "fish": "register-python-argcomplete --shell fish diagdoc | source",
    "tcsh": "eval `register-python-argcomplete --shell tcsh diagdoc`",
}


def detect_shell() -> str:
    """Shell name from $SHELL, defaulting to bash."""
    name = Path(os.environ.get("SHELL", "")).name
    return name if name in SHELLS else "bash"


def rc_file_for(shell: str) -> Path:
    home = Path.home()
    if shell == "fish":
        return home / ".config" / "fish" / "config.fish"
    return home / f".{shell}rc"


def argcomplete_available() -> bool:
    try:
        import argcomplete  # noqa: F401
    except ImportError:
        return False
    return True


def run(args: argparse.Namespace) -> int:
    """Handle ``diagdoc completion``."""
    if not argcomplete_available():
        print("Error: argcomplete is not installed.", file=sys.stderr)
        print("Install with: pip install diagdoc[completion]", file=sys.stderr)
        return 1

    shell = getattr(args, "shell", None) or detect_shell()
    line = ACTIVATION_LINES[shell]
    rc_file = rc_file_for(shell)

    if not getattr(args, "install", False):
        print(f"Shell completion for {shell}:")
        print()
        print(f"Add the following to {rc_file}:")
        print()
        print(f"  {line}")
        print()
        print(f"Or run: diagdoc completion --install --shell {shell}")
        return 0

    if rc_file.exists() and MARKER in rc_file.read_text(encoding="utf-8"):
        print(f"Completion already installed in {rc_file}")
        return 0
    try:
        rc_file.parent.mkdir(parents=True, exist_ok=True)
        with open(rc_file, "a", encoding="utf-8") as f:
            f.write(f"\n{MARKER}\n{line}\n")
    except OSError as e:
        print(f"Error writing to {rc_file}: {e}", file=sys.stderr)
        return 1
    print(f"Installed completion in {rc_file}")
    return 0
