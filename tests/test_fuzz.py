from __future__ import annotations

import os

import pytest
from indent_alignment.fixer import fix_markdown
from indent_alignment.linter import lint_markdown

atheris = pytest.importorskip("atheris")

LINE_STARTS = ("", "* ", "- ", "1. ", "10. ", "> ", "```", "    ", "[^1]: ", "<div>", "# ")


def _fuzzed_document(provider) -> str:
    lines: list[str] = []
    while provider.remaining_bytes() > 0 and len(lines) < 64:
        indent = " " * provider.ConsumeIntInRange(0, 6)
        start = LINE_STARTS[provider.ConsumeIntInRange(0, len(LINE_STARTS) - 1)]
        lines.append(indent + start + provider.ConsumeUnicodeNoSurrogates(24))
    return "\n".join(lines) + "\n"


def test_lint_markdown_with_fuzzed_text():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    checked = 0

    for _ in range(64):
        if provider.remaining_bytes() == 0:
            break
        text = provider.ConsumeUnicodeNoSurrogates(256)
        for diagnostic in lint_markdown(text):
            assert diagnostic.expected != diagnostic.actual
        checked += 1

    assert checked  # ensure we exercised the loop


def test_fix_markdown_with_fuzzed_documents():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)

    document = _fuzzed_document(provider)
    fixed = fix_markdown(document)

    assert fixed.count("\n") == document.count("\n")
