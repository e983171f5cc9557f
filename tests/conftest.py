"""Shared fixtures: fake typesetting engines and throwaway compiler configs."""

import stat
import sys
from pathlib import Path

import pytest
from loguru import logger

from resumake.config import CompilerConfig
from resumake.contexts.rendering.fallback_pdf import encode_minimal_pdf

# Each script finds the .tex argument (always last) and writes next to it
_PREAMBLE = """#!/bin/sh
for last; do :; done
stem="${last%.tex}"
"""

FAKE_ENGINES = {
    "failing": _PREAMBLE
    + """printf 'This is a fake TeX engine\\n! Undefined control sequence.\\nl.3 \\\\badmacro\\n' > "$stem.log"
echo "fatal error" >&2
exit 1
""",
    "no_pdf": _PREAMBLE
    + """printf 'This is a fake TeX engine\\nNo pages of output.\\n' > "$stem.log"
exit 0
""",
    "silent_failure": """#!/bin/sh
exit 3
""",
    "sleeping": """#!/bin/sh
exec sleep 30
""",
}


@pytest.fixture
def fake_engine(tmp_path):
    """
    Factory for executable fake engines.

    fake_engine("failing") returns the path of a script that behaves like a
    failing pdflatex run; fake_engine("ok") one that writes a real PDF and
    records every invocation in engines/invocations.
    """
    engine_dir = tmp_path / "engines"
    engine_dir.mkdir()
    sample_pdf = engine_dir / "sample.pdf"
    sample_pdf.write_bytes(encode_minimal_pdf("Compiled by fake engine"))

    def make(kind: str) -> Path:
        if kind == "ok":
            body = _PREAMBLE + (
                f'echo "$@" >> "{engine_dir}/invocations"\n'
                "printf 'LaTeX Warning: There were undefined references.\\n' > \"$stem.log\"\n"
                f'cp "{sample_pdf}" "$stem.pdf"\n'
                "exit 0\n"
            )
        else:
            body = FAKE_ENGINES[kind]
        script = engine_dir / f"{kind}.sh"
        script.write_text(body, encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return make


@pytest.fixture
def compiler_config(tmp_path):
    """Compiler settings isolated to tmp_path with a short cleanup delay."""

    def make(compiler: str = "pdflatex", **overrides) -> CompilerConfig:
        settings = dict(
            compiler=str(compiler),
            work_root=str(tmp_path / "work"),
            cleanup_delay_s=0.1,
            timeout_s=10.0,
        )
        settings.update(overrides)
        return CompilerConfig(**settings)

    return make


@pytest.fixture(autouse=True)
def _reset_logger():
    """Drop sinks added by CLI tests so later tests never write to closed streams."""
    yield
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
