from __future__ import annotations

from pathlib import Path

import pytest

from tagjump.core.errors import FileNotFound, OutOfRange, PatternNotFound
from tagjump.tags.resolver import AddressResolver, ResolutionCache, read_source_lines
from tagjump.tags.types import NumericAddress, PatternAddress, TagRecord


@pytest.fixture
def resolver(workspace: Path) -> AddressResolver:
    return AddressResolver(workspace)


def test_numeric_is_zero_based(resolver: AddressResolver) -> None:
    assert resolver.resolve("a.c", NumericAddress(3)) == 2
    assert resolver.resolve("a.c", NumericAddress(1)) == 0


def test_numeric_zero_is_out_of_range(resolver: AddressResolver) -> None:
    with pytest.raises(OutOfRange):
        resolver.resolve("a.c", NumericAddress(0))


def test_numeric_missing_file(resolver: AddressResolver) -> None:
    with pytest.raises(FileNotFound):
        resolver.resolve("gone.c", NumericAddress(4))


def test_anchored_start_pattern(resolver: AddressResolver) -> None:
    assert resolver.resolve("foo.c", PatternAddress("int foo()", anchored_start=True)) == 0


def test_anchor_flags_restrict_position(workspace: Path) -> None:
    (workspace / "m.c").write_text("x = foo;\nfoo = 1;\n  foo\nfoo\n", encoding="utf-8")
    resolver = AddressResolver(workspace)
    assert resolver.resolve("m.c", PatternAddress("foo")) == 0
    assert resolver.resolve("m.c", PatternAddress("foo", anchored_start=True)) == 1
    assert resolver.resolve("m.c", PatternAddress("foo", anchored_end=True)) == 2
    assert resolver.resolve("m.c", PatternAddress("foo", True, True)) == 3


def test_pattern_is_literal_not_regex(workspace: Path) -> None:
    (workspace / "r.c").write_text("int aab(void);\nint *a.b(void);\n", encoding="utf-8")
    resolver = AddressResolver(workspace)
    assert resolver.resolve("r.c", PatternAddress("int *a.b(void);", True, True)) == 1


def test_pattern_not_found(resolver: AddressResolver) -> None:
    with pytest.raises(PatternNotFound):
        resolver.resolve("foo.c", PatternAddress("int foo(int x)", anchored_start=True))


def test_pattern_missing_file(resolver: AddressResolver) -> None:
    with pytest.raises(FileNotFound):
        resolver.resolve("gone.c", PatternAddress("int foo()"))


def test_absolute_tag_paths(workspace: Path, tmp_path_factory) -> None:
    other = tmp_path_factory.mktemp("other")
    (other / "o.c").write_text("void other(void) {}\n", encoding="utf-8")
    resolver = AddressResolver(workspace)
    record = TagRecord(symbol="other", path=str(other / "o.c"), address=PatternAddress("void other"))
    location = resolver.resolve_record(record)
    assert location.path == other / "o.c"
    assert location.lineno == 0


def test_file_read_once_per_cache(workspace: Path) -> None:
    cache = ResolutionCache()
    resolver = AddressResolver(workspace, cache)
    assert resolver.resolve("foo.c", PatternAddress("int foo()", True)) == 0
    (workspace / "foo.c").unlink()
    # same file, different pattern: served from cached lines
    assert resolver.resolve("foo.c", PatternAddress("return 1;")) == 1
    assert cache.file_count == 1


def test_failures_are_cached_until_cleared(workspace: Path) -> None:
    cache = ResolutionCache()
    resolver = AddressResolver(workspace, cache)
    address = PatternAddress("int baz()", True)
    with pytest.raises(PatternNotFound):
        resolver.resolve("foo.c", address)
    (workspace / "foo.c").write_text("int baz() {}\n", encoding="utf-8")
    with pytest.raises(PatternNotFound):
        resolver.resolve("foo.c", address)
    cache.clear()
    assert resolver.resolve("foo.c", address) == 0


def test_lines_split_on_newline_only(tmp_path: Path) -> None:
    path = tmp_path / "ff.c"
    path.write_bytes(b"a\x0cb\r\nc\n")
    assert read_source_lines(path) == ["a\x0cb", "c", ""]
