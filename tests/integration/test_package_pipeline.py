"""Integration tests for the full package inspection pipeline.

These tests drive aggregation, report rendering, merged XML export and
extraction together over the same synthetic packages, the way the CLI and
library callers combine them.
"""

import json
import subprocess
import sys
from datetime import date

import pytest
from utils import (
    cleanup_test_dir,
    create_appv_members,
    create_manifest_xml,
    create_package_history_xml,
    create_test_appv,
    create_test_temp_dir,
)

from appvinspect import (
    HtmlReportRenderer,
    ReportOptions,
    WellKnownXml,
    aggregate,
    extract_well_known,
    load_merged_document,
    load_xml,
)
from appvinspect.xml_loader import child_text, find_child


@pytest.mark.integration
class TestPackagePipeline:
    """Integration tests over a realistic package."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = create_test_temp_dir()
        members = create_appv_members(
            AppxManifest=create_manifest_xml(install_dates=("20150615", "maandag 15 juni 2015")),
            PackageHistory=create_package_history_xml(times=("2015-06-15T10:30:00Z", "6/20/2016 4:15:00 PM")),
        )
        for index in range(40):
            members[f"Root/VFS/ProgramFilesX64/Notepad++/plugins/plugin{index:02d}.dll"] = bytes([index]) * 1000
        self.members = members
        self.package = create_test_appv(self.temp_dir / "Notepad++.appv", members)

    def teardown_method(self):
        """Clean up test environment."""
        cleanup_test_dir(self.temp_dir)

    def test_summary_report_and_extraction_agree(self):
        """Report content, merged XML and extracted files describe the same package."""
        summary = aggregate(self.package)

        assert summary.file_count == len(self.members)
        assert summary.uncompressed_size == sum(len(data) for data in self.members.values())
        assert [asset.install_date for asset in summary.asset_intelligence] == [date(2015, 6, 15), None]
        assert summary.package_history[1].time.hour == 16

        report = self.temp_dir / "report.html"
        HtmlReportRenderer(ReportOptions(detailed=True)).render(summary, report)
        html = report.read_text(encoding="utf-8")
        assert "plugins/plugin39.dll" in html
        assert summary.display_name in html

        merged = load_merged_document(self.package)
        manifest = find_child(merged.root, "Package")
        assert child_text(manifest, "Properties", "DisplayName") == summary.display_name

        out_dir = self.temp_dir / "extracted"
        for kind in WellKnownXml:
            saved = extract_well_known(self.package, kind, out_dir)
            assert saved.read_bytes() == self.members[kind.filename]
            load_xml(saved.read_bytes(), kind=kind.value)

    def test_json_round_trip_preserves_order(self):
        """JSON output keeps collection order from the archive and documents."""
        data = json.loads(aggregate(self.package).to_json())

        assert [entry["full_path"] for entry in data["files"]] == list(self.members)
        assert [app["name"] for app in data["applications"]] == ["Notepad++", "Notepad++ Updater"]
        assert data["package_history"][0]["time"] == "2015-06-15T10:30:00+00:00"


@pytest.mark.e2e
@pytest.mark.slow
@pytest.mark.cli
class TestCommandLineProcess:
    """Run the CLI as a separate process."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = create_test_temp_dir()
        self.package = create_test_appv(self.temp_dir / "Notepad++.appv")

    def teardown_method(self):
        """Clean up test environment."""
        cleanup_test_dir(self.temp_dir)

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            [sys.executable, "-m", "appvinspect", "--no-config", *args],
            capture_output=True,
            text=True,
            cwd=self.temp_dir,
            timeout=60,
        )

    def test_info_json(self):
        """python -m appvinspect info --json prints the summary."""
        result = self._run("info", str(self.package), "--json")

        assert result.returncode == 0, result.stderr
        assert json.loads(result.stdout)["name"] == "Reserved"

    def test_report_and_extract(self):
        """report and extract write their files relative to the package and cwd."""
        report = self._run("report", str(self.package))
        extract = self._run("extract", str(self.package), "streammap")

        assert report.returncode == 0, report.stderr
        assert extract.returncode == 0, extract.stderr
        assert (self.temp_dir / "Notepad++.html").is_file()
        assert (self.temp_dir / "StreamMap.xml").is_file()

    def test_error_exit_code(self):
        """Errors are reported on stderr with a non-zero exit code."""
        result = self._run("info", str(self.temp_dir / "missing.appv"))

        assert result.returncode == 4
        assert result.stderr.startswith("Error:")
