#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Renderers that turn package summaries into output documents."""

from appvinspect.renderers.html import DEFAULT_CSS, HtmlReportRenderer

__all__ = ["DEFAULT_CSS", "HtmlReportRenderer"]
