#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/appvinspect/renderers/html.py
"""HTML report rendering for App-V package summaries.

This module provides the HtmlReportRenderer class which turns a
:class:`PackageSummary` into a self-contained HTML document using a Jinja2
template. The report carries a package identity table, file statistics,
the application list and the package history; detailed mode adds the
asset-intelligence table and the full file listing. The built-in style
sheet can be replaced with caller-supplied CSS.

"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any, Optional, Union

from appvinspect.about import VersionInfo
from appvinspect.exceptions import OutputWriteError, RenderingError
from appvinspect.models import PackageSummary
from appvinspect.options import ReportOptions
from appvinspect.utils.io_utils import write_content
from appvinspect.utils.text import format_size

if TYPE_CHECKING:
    from jinja2 import Template

logger = logging.getLogger(__name__)

DEFAULT_CSS = """
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
    line-height: 1.5;
    max-width: 1100px;
    margin: 0 auto;
    padding: 2rem;
    color: #333;
}

h1 { font-size: 1.8rem; border-bottom: 1px solid #eee; padding-bottom: 0.3rem; }
h2 { font-size: 1.3rem; margin-top: 2rem; }

table {
    border-collapse: collapse;
    width: 100%;
    margin: 0.5rem 0 1rem 0;
    font-size: 0.9rem;
}

th, td {
    border: 1px solid #ddd;
    padding: 0.35rem 0.6rem;
    text-align: left;
    vertical-align: top;
}

th { background-color: #f5f5f5; font-weight: 600; }
table.properties th { width: 30%; }
td.number { text-align: right; font-variant-numeric: tabular-nums; }
p.empty { color: #777; font-style: italic; }
footer { margin-top: 2rem; font-size: 0.8rem; color: #777; }
"""

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ language }}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ title }}</title>
<style>
{{ css | safe }}
</style>
</head>
<body>
<main>
<h1>{{ title }}</h1>

<section id="package">
<h2>Package</h2>
<table class="properties">
{% for label, value in identity %}
<tr><th>{{ label }}</th><td>{{ value }}</td></tr>
{% endfor %}
</table>
</section>

<section id="file-statistics">
<h2>File Statistics</h2>
<table class="properties">
<tr><th>Files</th><td class="number">{{ summary.file_count }}</td></tr>
<tr><th>Uncompressed size</th><td class="number">{{ summary.uncompressed_size | filesize }}</td></tr>
<tr><th>Compressed size</th><td class="number">{{ summary.compressed_size | filesize }}</td></tr>
<tr><th>Compression ratio</th><td class="number">{{ compression_ratio }}</td></tr>
</table>
</section>

<section id="applications">
<h2>Applications ({{ summary.applications | length }})</h2>
{% if summary.applications %}
<table>
<thead><tr><th>Name</th><th>Version</th><th>Target</th><th>Origin</th></tr></thead>
<tbody>
{% for app in summary.applications %}
<tr><td>{{ app.name or app.id }}</td><td>{{ app.version }}</td><td>{{ app.target or app.id }}</td><td>{{ app.origin }}</td></tr>
{% endfor %}
</tbody>
</table>
{% else %}
<p class="empty">No applications published.</p>
{% endif %}
</section>

<section id="package-history">
<h2>Package History</h2>
{% if summary.package_history %}
<table>
<thead><tr><th>Time</th><th>Package version</th><th>Sequencer version</th><th>Sequencer user</th>
<th>Sequencing station</th><th>Windows version</th><th>System type</th><th>Locale</th><th>Upgrade</th></tr></thead>
<tbody>
{% for item in summary.package_history %}
<tr><td>{{ item.time | timestamp }}</td><td>{{ item.package_version }}</td><td>{{ item.sequencer_version }}</td>
<td>{{ item.sequencer_user }}</td><td>{{ item.sequencing_station }}</td><td>{{ item.windows_version }}</td>
<td>{{ item.system_type }}</td><td>{{ item.locale }}</td><td>{{ item.in_upgrade }}</td></tr>
{% endfor %}
</tbody>
</table>
{% else %}
<p class="empty">No package history recorded.</p>
{% endif %}
</section>
{% if detailed %}

<section id="asset-intelligence">
<h2>Asset Intelligence</h2>
{% if summary.asset_intelligence %}
<table>
<thead><tr><th>Product</th><th>Version</th><th>Publisher</th><th>Language</th><th>Install date</th>
<th>Installed location</th><th>Software code</th></tr></thead>
<tbody>
{% for asset in summary.asset_intelligence %}
<tr><td>{{ asset.product_name }}</td><td>{{ asset.product_version }}</td><td>{{ asset.publisher }}</td>
<td>{{ asset.language }}</td><td>{{ asset.install_date.isoformat() if asset.install_date else "" }}</td>
<td>{{ asset.installed_location }}</td><td>{{ asset.software_code }}</td></tr>
{% endfor %}
</tbody>
</table>
{% else %}
<p class="empty">No asset intelligence recorded.</p>
{% endif %}
</section>

<section id="files">
<h2>Files</h2>
<table>
<thead><tr><th>Path</th><th>Size</th><th>Compressed</th><th>Modified</th></tr></thead>
<tbody>
{% for entry in summary.files %}
<tr><td>{{ entry.full_path }}</td><td class="number">{{ entry.uncompressed_length | filesize }}</td>
<td class="number">{{ entry.compressed_length | filesize }}</td><td>{{ entry.last_write_time | timestamp }}</td></tr>
{% endfor %}
</tbody>
</table>
</section>
{% endif %}
</main>
<footer>Generated by {{ generator }} on {{ generated_at | timestamp }}</footer>
</body>
</html>
"""


def _format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d %H:%M:%S")


class HtmlReportRenderer:
    """Render a :class:`PackageSummary` as a standalone HTML report.

    Parameters
    ----------
    options : ReportOptions or None
        Report configuration
    version_info : VersionInfo or None
        Descriptor shown in the report footer; built with
        :meth:`VersionInfo.current` when omitted

    """

    def __init__(self, options: Optional[ReportOptions] = None, version_info: Optional[VersionInfo] = None):
        """Initialize the renderer with options and a version descriptor."""
        self.options = options or ReportOptions()
        self.version_info = version_info or VersionInfo.current()
        self._template: Optional[Template] = None

    def _get_template(self) -> Template:
        if self._template is None:
            from jinja2 import Environment, StrictUndefined

            env = Environment(autoescape=True, undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True)
            env.filters["filesize"] = format_size
            env.filters["timestamp"] = _format_timestamp
            self._template = env.from_string(REPORT_TEMPLATE)
        return self._template

    def _resolve_css(self) -> str:
        if self.options.css is not None:
            css = self.options.css
        elif self.options.css_file:
            try:
                css = Path(self.options.css_file).read_text(encoding="utf-8")
            except OSError as e:
                raise RenderingError(
                    f"Could not read style sheet {self.options.css_file}: {e}",
                    rendering_stage="stylesheet",
                    original_error=e,
                ) from e
        else:
            css = DEFAULT_CSS
        # Keep caller CSS from closing the <style> element early
        return css.replace("</", "<\\/")

    def _identity_rows(self, summary: PackageSummary) -> list[tuple[str, str]]:
        return [
            ("Name", summary.name),
            ("Display name", summary.display_name),
            ("Description", summary.description),
            ("Publisher", summary.publisher_display_name or summary.publisher),
            ("Version", summary.version),
            ("Package ID", summary.package_id),
            ("Version ID", summary.version_id),
            ("Minimum OS version", summary.os_min_version),
            ("Maximum OS version tested", summary.os_max_version_tested),
            ("Sequencer architecture", summary.sequencer_architecture),
            ("Primary feature block load all", summary.primary_feature_block_load_all),
            ("File system root (PVAD)", summary.file_system_root),
            ("File system short path", summary.file_system_short),
        ]

    def build_context(self, summary: PackageSummary, generated_at: Optional[datetime] = None) -> dict[str, Any]:
        """Assemble the template context for ``summary``."""
        if summary.compressed_size:
            compression_ratio = f"{summary.uncompressed_size / summary.compressed_size:.2f}:1"
        else:
            compression_ratio = "n/a"
        return {
            "title": self.options.resolved_title(summary.display_name),
            "language": self.options.language,
            "css": self._resolve_css(),
            "summary": summary,
            "identity": self._identity_rows(summary),
            "compression_ratio": compression_ratio,
            "detailed": self.options.detailed,
            "generator": self.version_info.label,
            "generated_at": generated_at or datetime.now(),
        }

    def render_to_string(self, summary: PackageSummary, generated_at: Optional[datetime] = None) -> str:
        """Render the report and return it as a string."""
        context = self.build_context(summary, generated_at=generated_at)
        try:
            return self._get_template().render(**context)
        except Exception as e:
            raise RenderingError(
                f"Failed to render HTML report: {e!r}", rendering_stage="template", original_error=e
            ) from e

    def render(self, summary: PackageSummary, output: Union[str, Path, IO[str]]) -> None:
        """Render the report and write it to a path or text stream."""
        html = self.render_to_string(summary)
        try:
            write_content(html, output)
        except OSError as e:
            raise OutputWriteError(str(output), original_error=e) from e
        logger.info("Wrote HTML report for %s", summary.name or summary.source_path)
