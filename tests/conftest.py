"""
Global test configuration fixtures for i18n generator tests.

Provides sample translation documents, translation directory trees and
validated GeneratorConfig instances shared across the unit and integration
suites.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from i18n_generator.config.schema import GeneratorConfig
from tests.utils.file_helpers import write_json


@pytest.fixture
def languages() -> list[str]:
    """Baseline language pair."""
    return ["vi", "en"]


@pytest.fixture
def nested_document() -> dict[str, object]:
    """
    A document mixing nested objects, dot-notation keys, partial coverage
    and non-object values.
    """
    return {
        "login": {
            "title": {"vi": "Đăng nhập", "en": "Login"},
            "email": {
                "label": {"vi": "Email", "en": "Email"},
                "placeholder": {"vi": "Nhập email"},
            },
        },
        "booking.summary.text": {"vi": "Tóm tắt", "en": "Summary"},
        "tags": ["a", "b"],
        "version": 3,
        "empty": {},
    }


@pytest.fixture
def translation_dir(tmp_path: Path, nested_document: dict[str, object]) -> Path:
    """Input directory with two documents and one non-JSON file."""
    input_dir = tmp_path / "translations"
    _ = write_json(input_dir / "auth.json", nested_document)
    _ = write_json(
        input_dir / "common.json",
        {"hello": {"vi": "Xin chào", "en": "Hello"}, "bye": {"en": "Bye"}},
    )
    _ = (input_dir / "README.md").write_text("not a translation file", encoding="utf-8")
    return input_dir


@pytest.fixture
def generator_config(
    tmp_path: Path, translation_dir: Path, languages: list[str]
) -> GeneratorConfig:
    """Inline-only configuration over ``translation_dir``."""
    return GeneratorConfig(
        languages=languages,
        input_dir=translation_dir,
        output_dir=tmp_path / "locales",
        max_workers=2,
        use_workers=False,
    )
