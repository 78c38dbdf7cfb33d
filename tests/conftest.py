from __future__ import annotations

import sys
import textwrap
import threading
from pathlib import Path
from typing import Optional

import pytest

from tagjump.tools.ctags_tools import GenerationArgs, GenerationResult, TagGenerator


class FakeGenerator(TagGenerator):
    """Writes canned tags content instead of spawning ctags."""

    def __init__(
        self,
        content: str = "",
        *,
        returncode: int = 0,
        gate: Optional[threading.Event] = None,
    ) -> None:
        self.content = content
        self.returncode = returncode
        self.gate = gate
        self.calls = 0
        self.started = threading.Event()
        self.last_args: Optional[GenerationArgs] = None

    def generate(self, root, tags_path, args, *, cancel=None, timeout_sec=None):
        self.calls += 1
        self.last_args = args
        self.started.set()
        if self.gate is not None:
            while not self.gate.wait(0.01):
                if cancel is not None and cancel.is_set():
                    return GenerationResult(success=False, log="killed", cancelled=True)
        if self.returncode != 0:
            return GenerationResult(success=False, log="ctags: boom", returncode=self.returncode)
        Path(tags_path).write_text(self.content, encoding="utf-8")
        return GenerationResult(success=True, log="", returncode=0)


def tags_lines(*rows: str) -> str:
    header = "!_TAG_FILE_FORMAT\t2\t/extended format/\n!_TAG_FILE_SORTED\t1\t/0=unsorted/\n"
    return header + "".join(row + "\n" for row in rows)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "foo.c").write_text("int foo() {\n  return 1;\n}\n", encoding="utf-8")
    (tmp_path / "a.c").write_text("// a\n\nint bar = 1;\n", encoding="utf-8")
    (tmp_path / "b.c").write_text("".join(f"// {i}\n" for i in range(1, 10)) + "int bar = 2;\n")
    return tmp_path


FAKE_CTAGS = textwrap.dedent(
    """
    import sys

    argv = sys.argv[1:]
    if "--fail" in argv:
        sys.exit(2)
    out = argv[argv.index("-f") + 1]
    with open(out, "w", encoding="utf-8") as fh:
        fh.write("!_TAG_FILE_SORTED\\t1\\t/0=unsorted/\\n")
        fh.write("foo\\tfoo.c\\t/^int foo() {$/;\\"\\tf\\n")
    """
)


@pytest.fixture
def fake_ctags(tmp_path: Path) -> list[str]:
    """Command prefix for a python script that behaves like ctags -f."""
    script = tmp_path / "fake_ctags.py"
    script.write_text(FAKE_CTAGS, encoding="utf-8")
    return [sys.executable, str(script)]


@pytest.fixture
def fake_generator():
    return FakeGenerator


@pytest.fixture
def make_tags():
    return tags_lines
