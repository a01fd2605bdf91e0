"""HTML Generation module for diagnostic reports.

This module renders a DiagnosticReport as a standalone HTML page.
"""

from diagdoc.html.generator import HTMLGenerator

__all__ = ["HTMLGenerator"]
