"""
Split a multi-language translation tree into per-language trees.

The walk is iterative: pending (source mapping, target mappings) pairs are
kept on an explicit stack so arbitrarily deep documents never grow the
Python call stack. Each node is classified once and the classification is
shared by every requested language, which keeps the outputs structurally
isomorphic.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .types import (
    ExtractedDocument,
    LanguageSet,
    NodeKind,
    TranslationDocument,
    as_language_set,
)


def classify_node(value: object, language_set: LanguageSet) -> NodeKind:
    """
    Classify the value stored under a branch key.

    Args:
        value: The value found under a key of a branch mapping
        language_set: Configured language codes

    Returns:
        SKIP for arrays and scalars, LEAF when any key is a language code,
        BRANCH otherwise (including the empty mapping)
    """
    if not isinstance(value, dict):
        return NodeKind.SKIP
    if language_set.intersects(value):  # pyright: ignore[reportUnknownArgumentType]
        return NodeKind.LEAF
    return NodeKind.BRANCH


def extract_languages(
    document: Mapping[str, object],
    languages: Iterable[str],
    language_set: LanguageSet | Iterable[str] | None = None,
) -> dict[str, ExtractedDocument]:
    """
    Extract several languages from one document in a single pass.

    Args:
        document: Parsed translation document (a JSON object)
        languages: Language codes to produce output for
        language_set: Codes used to recognise leaves (defaults to ``languages``)

    Returns:
        Mapping of language code to its reshaped document

    Raises:
        TypeError: If ``document`` is not a mapping
    """
    if not isinstance(document, Mapping):
        raise TypeError(
            f"Translation document must be a JSON object, got {type(document).__name__}"
        )

    requested = tuple(dict.fromkeys(languages))
    known = as_language_set(language_set if language_set is not None else requested)
    for code in requested:
        known = known.with_code(code)

    roots: dict[str, ExtractedDocument] = {code: {} for code in requested}
    stack: list[tuple[Mapping[str, object], dict[str, ExtractedDocument]]] = [
        (document, roots)
    ]

    while stack:
        source, targets = stack.pop()

        for key, value in source.items():
            kind = classify_node(value, known)

            if kind is NodeKind.SKIP:
                continue

            leaf_or_branch: TranslationDocument = value  # pyright: ignore[reportAssignmentType]
            if kind is NodeKind.LEAF:
                # Languages missing from this leaf simply omit the key
                for code, target in targets.items():
                    if code in leaf_or_branch:
                        target[key] = leaf_or_branch[code]
                continue

            children: dict[str, ExtractedDocument] = {}
            for code, target in targets.items():
                child: ExtractedDocument = {}
                target[key] = child
                children[code] = child
            stack.append((leaf_or_branch, children))

    return roots


def extract_translations(
    document: Mapping[str, object],
    language: str,
    language_set: LanguageSet | Iterable[str],
) -> ExtractedDocument:
    """
    Extract a single language from a translation document.

    Pure function of its arguments: the input document is never mutated and
    repeated calls give equal results.

    Example:
        >>> extract_translations({"a": {"vi": "X", "en": "Y"}}, "en", ["vi", "en"])
        {'a': 'Y'}
    """
    return extract_languages(document, (language,), language_set)[language]
