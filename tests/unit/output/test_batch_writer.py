"""
Tests for the batch writer.

Covers directory creation, output formatting and the reporting of partial
failures without losing the outcome of the other writes.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_generator.extraction.types import ExtractionResult
from i18n_generator.output.batch_writer import (
    BatchWriter,
    WriteFailure,
    WriteReport,
    serialize_document,
)
from i18n_generator.utils.core.exceptions import WriteError
from tests.utils.file_helpers import read_json


def make_result(output_dir: Path, language: str, name: str = "common.json") -> ExtractionResult:
    return ExtractionResult(
        language=language,
        source=Path("translations") / name,
        destination=output_dir / language / name,
        content={"hello": f"hello-{language}", "group": {"a": "Á"}},
    )


class TestSerializeDocument:
    """Test the serialize_document function."""

    def test_two_space_indent_and_literal_unicode(self) -> None:
        text = serialize_document({"a": "Đăng nhập"})

        assert text == '{\n  "a": "Đăng nhập"\n}'

    def test_compact_output(self) -> None:
        assert serialize_document({"a": {"b": "c"}}, indent=None) == '{"a": {"b": "c"}}'


class TestWriteReport:
    """Test the WriteReport class."""

    def test_empty_report_is_success(self) -> None:
        report = WriteReport()

        assert report.success
        assert not report.partial
        assert report.total == 0

    def test_partial_report(self) -> None:
        report = WriteReport(
            written=[Path("out/vi/a.json")],
            failed=[WriteFailure(Path("out/en/a.json"), "en", Path("a.json"), "denied")],
        )

        assert not report.success
        assert report.partial
        assert report.total == 2
        assert "1 written, 1 failed" in str(report)

    def test_total_failure_is_not_partial(self) -> None:
        report = WriteReport(
            failed=[WriteFailure(Path("out/en/a.json"), "en", Path("a.json"), "denied")]
        )

        assert not report.success
        assert not report.partial


class TestBatchWriter:
    """Test the BatchWriter class."""

    @pytest.mark.asyncio
    async def test_writes_all_results(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "locales"
        results = [make_result(output_dir, "vi"), make_result(output_dir, "en")]

        report = await BatchWriter().write_all(results)

        assert report.success
        assert sorted(report.written) == sorted(r.destination for r in results)
        assert read_json(output_dir / "vi" / "common.json") == {
            "hello": "hello-vi",
            "group": {"a": "Á"},
        }
        assert (output_dir / "en" / "common.json").exists()

    @pytest.mark.asyncio
    async def test_existing_directories_are_reused(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "locales"
        (output_dir / "vi").mkdir(parents=True)

        report = await BatchWriter().write_all([make_result(output_dir, "vi")])

        assert report.success

    @pytest.mark.asyncio
    async def test_overwrites_previous_output(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "locales"
        stale = output_dir / "vi" / "common.json"
        stale.parent.mkdir(parents=True)
        _ = stale.write_text('{"old": "value"}', encoding="utf-8")

        _ = await BatchWriter().write_all([make_result(output_dir, "vi")])

        assert read_json(stale) == {"hello": "hello-vi", "group": {"a": "Á"}}

    @pytest.mark.asyncio
    async def test_respects_indent(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "locales"

        _ = await BatchWriter(indent=4).write_all([make_result(output_dir, "vi")])

        text = (output_dir / "vi" / "common.json").read_text(encoding="utf-8")
        assert text.startswith('{\n    "hello"')

    @pytest.mark.asyncio
    async def test_empty_batch(self) -> None:
        report = await BatchWriter().write_all([])

        assert report.success
        assert report.total == 0

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_other_writes(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "locales"
        output_dir.mkdir()
        # A regular file where the "en" directory should be
        _ = (output_dir / "en").write_text("blocker", encoding="utf-8")

        results = [make_result(output_dir, "vi"), make_result(output_dir, "en")]
        report = await BatchWriter().write_all(results)

        assert report.partial
        assert report.written == [output_dir / "vi" / "common.json"]
        assert len(report.failed) == 1

        failure = report.failed[0]
        assert failure.destination == output_dir / "en" / "common.json"
        assert failure.language == "en"
        assert failure.source == Path("translations") / "common.json"
        assert str(failure.destination) in failure.message
        assert (output_dir / "vi" / "common.json").exists()

    @pytest.mark.asyncio
    async def test_write_one_raises_write_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "locales"
        _ = blocker.write_text("blocker", encoding="utf-8")

        with pytest.raises(WriteError) as exc_info:
            _ = await BatchWriter().write_one(make_result(blocker, "vi"))

        assert exc_info.value.destination == str(blocker / "vi" / "common.json")
        assert exc_info.value.language == "vi"
