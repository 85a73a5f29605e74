"""Tests for core.report_generator module."""

from dataclasses import replace
from pathlib import Path

from core.report_generator import ReportGenerator, report_markup


class TestReportMarkup:
    def test_bold(self):
        assert report_markup("**Risk level**") == "<b>Risk level</b>"

    def test_escapes_and_breaks(self):
        assert report_markup("a < b & c\nnext") == "a &lt; b &amp; c<br/>next"

    def test_strips_outer_whitespace(self):
        assert report_markup("\n  text  \n") == "text"


class TestGeneratePdf:
    def test_creates_file(self, tmp_dir, sample_session):
        gen = ReportGenerator()
        output = str(tmp_dir / "report.pdf")
        result = gen.generate_pdf(sample_session, output)
        assert result is True
        assert Path(output).exists()

    def test_pdf_header(self, tmp_dir, sample_session):
        gen = ReportGenerator()
        output = str(tmp_dir / "report.pdf")
        gen.generate_pdf(sample_session, output)
        with open(output, "rb") as f:
            assert f.read(5) == b"%PDF-"

    def test_progress_callback(self, tmp_dir, sample_session):
        gen = ReportGenerator()
        calls = []
        gen.generate_pdf(sample_session, str(tmp_dir / "report.pdf"), on_progress=lambda s, t, m: calls.append(s))
        assert calls == [1, 2, 3, 4]

    def test_without_classification_or_image(self, tmp_dir, sample_session):
        session = replace(sample_session, vision_result=None, image_url=None)
        gen = ReportGenerator()
        assert gen.generate_pdf(session, str(tmp_dir / "report.pdf")) is True

    def test_no_report_writes_nothing(self, tmp_dir, sample_session):
        session = replace(sample_session, llm_report=None, error="API Error: 503")
        output = tmp_dir / "report.pdf"
        assert ReportGenerator().generate_pdf(session, str(output)) is False
        assert not output.exists()

    def test_bad_path(self, sample_session):
        gen = ReportGenerator()
        assert gen.generate_pdf(sample_session, "/nonexistent/dir/report.pdf") is False
