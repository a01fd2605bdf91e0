"""
diagdoc.core.patterns - Precompiled regular expressions.

All patterns are compiled once at import time and shared read-only.
"""

import re

# Embeds: ![[target]] and ![alt](src)
WIKI_EMBED_PATTERN = re.compile(r"!\[\[([^\]\n]*)\]\]")
MD_EMBED_PATTERN = re.compile(r"!\[([^\]\n]*)\]\(([^)\n]*)\)")

# Links: [[target]], [[target|alias]] and [text](target)
WIKI_LINK_PATTERN = re.compile(r"\[\[([^\]\n]*)\]\]")
MD_LINK_PATTERN = re.compile(r"\[([^\]\n]*)\]\(([^)\n]*)\)")

# First pipe not preceded by a backslash
ALIAS_SEPARATOR_PATTERN = re.compile(r"(?<!\\)\|")

# Fenced code block delimiters (``` or ~~~ at line start, optionally indented)
FENCE_PATTERN = re.compile(r"^[ \t]*(```|~~~)", re.MULTILINE)

# YAML frontmatter block at the very start of a file
FRONTMATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?", re.DOTALL | re.MULTILINE)

EXTERNAL_SCHEMES = ("http://", "https://", "mailto:")
