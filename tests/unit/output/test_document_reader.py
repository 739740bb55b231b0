"""Tests for reading and parsing input documents."""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_generator.output.document_reader import (
    STREAM_BLOCK_SIZE,
    parse_document,
    read_document,
)
from i18n_generator.utils.core.exceptions import ErrorCategory, ParseError
from tests.utils.file_helpers import write_json


class TestParseDocument:
    """Test the parse_document function."""

    def test_parses_object(self) -> None:
        assert parse_document('{"a": {"en": "A"}}', "a.json") == {"a": {"en": "A"}}

    def test_invalid_json_raises_parse_error(self) -> None:
        with pytest.raises(ParseError, match="Invalid JSON in broken.json") as exc_info:
            _ = parse_document('{"a": ', "broken.json")

        assert exc_info.value.file == "broken.json"
        assert exc_info.value.category is ErrorCategory.PARSE

    def test_top_level_array_raises_parse_error(self) -> None:
        with pytest.raises(ParseError, match="Expected a JSON object"):
            _ = parse_document('["a"]', "list.json")

    def test_decoder_recursion_limit_raises_parse_error(self) -> None:
        text = '{"k":' * 5000 + '{"vi": "X"}' + "}" * 5000

        with pytest.raises(ParseError, match="Could not decode deep.json") as exc_info:
            _ = parse_document(text, "deep.json")

        assert exc_info.value.file == "deep.json"

    def test_oversized_integer_literal_raises_parse_error(self) -> None:
        text = '{"n": ' + "9" * 5000 + "}"

        with pytest.raises(ParseError, match="Could not decode numbers.json"):
            _ = parse_document(text, "numbers.json")


class TestReadDocument:
    """Test the read_document coroutine."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("use_streaming", [True, False])
    async def test_reads_document(self, tmp_path: Path, use_streaming: bool) -> None:
        path = write_json(tmp_path / "a.json", {"a": {"vi": "Xin chào", "en": "Hello"}})

        document = await read_document(path, use_streaming=use_streaming)

        assert document == {"a": {"vi": "Xin chào", "en": "Hello"}}

    @pytest.mark.asyncio
    async def test_streaming_and_whole_reads_agree_on_large_file(self, tmp_path: Path) -> None:
        data = {f"key{i}": {"vi": "ữ" * 50, "en": "x" * 50} for i in range(2000)}
        path = write_json(tmp_path / "large.json", data)
        assert path.stat().st_size > STREAM_BLOCK_SIZE

        streamed = await read_document(path, use_streaming=True)
        whole = await read_document(path, use_streaming=False)

        assert streamed == whole == data

    @pytest.mark.asyncio
    async def test_accepts_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.json"
        _ = path.write_bytes(b'\xef\xbb\xbf{"a": {"en": "A"}}')

        assert await read_document(path) == {"a": {"en": "A"}}

    @pytest.mark.asyncio
    async def test_malformed_file_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        _ = path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ParseError) as exc_info:
            _ = await read_document(path)

        assert exc_info.value.file == str(path)

    @pytest.mark.asyncio
    async def test_invalid_utf8_raises_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "latin1.json"
        _ = path.write_bytes(b'{"a": {"en": "caf\xe9"}}')

        with pytest.raises(ParseError, match="not valid UTF-8"):
            _ = await read_document(path)

    @pytest.mark.asyncio
    async def test_missing_file_raises_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _ = await read_document(tmp_path / "missing.json")
