# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for source discovery and runtime markers."""

from pathlib import Path

from recordshape.discovery import discover_sources
from recordshape.markers import (
    RecordInterfaceSettings,
    ignore_default,
    initializer,
    record_interface,
)


def _write_file(path: Path, content: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_ph6_dsc_001_discovery_respects_nested_gitignore(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(project_root / "keep.py")
    _write_file(project_root / "pkg" / "keep.py")
    _write_file(project_root / "pkg" / "generated" / "skip.py")
    _write_file(project_root / "pkg" / ".gitignore", "generated/\n")
    _write_file(project_root / ".git" / "hooks" / "hook.py")
    _write_file(project_root / "notes.txt")

    sources = discover_sources(project_root)

    assert [p.relative_to(project_root).as_posix() for p in sources] == [
        "keep.py",
        "pkg/keep.py",
    ]


def test_ph6_dsc_002_extra_patterns_are_applied(tmp_path: Path) -> None:
    project_root = tmp_path / "project"
    _write_file(project_root / "keep.py")
    _write_file(project_root / "tests" / "test_keep.py")
    _write_file(project_root / "pkg" / "old_api.py")

    sources = discover_sources(project_root, exclude=["tests/", "old_*.py"])

    assert [p.relative_to(project_root).as_posix() for p in sources] == ["keep.py"]


def test_ph6_dsc_003_subtree_rules_override_parents_and_ignored_rules_are_not_read(
    tmp_path: Path,
) -> None:
    project_root = tmp_path / "project"
    _write_file(project_root / ".gitignore", "*_gen.py\n")
    _write_file(project_root / "a_gen.py")
    _write_file(project_root / "pkg" / ".gitignore", "!b_gen.py\n")
    _write_file(project_root / "pkg" / "b_gen.py")
    _write_file(project_root / "other" / "b_gen.py")
    _write_file(project_root / "vendor" / "lib.py")
    (project_root / "vendor" / ".gitignore").write_bytes(b"\xff\xfe\n")

    sources = discover_sources(project_root, exclude=["vendor/"])

    assert [p.relative_to(project_root).as_posix() for p in sources] == [
        "pkg/b_gen.py"
    ]


def test_ph6_mrk_001_markers_tag_objects_and_return_them() -> None:
    @record_interface
    class Bare:
        pass

    @record_interface(add_builder=False, package="gen")
    class Configured:
        @ignore_default
        def greeting(self) -> str:
            return "hi"

        @initializer("DEFAULT_PORT")
        def port(self) -> int:
            return 0

    assert Bare.__record_interface__ == RecordInterfaceSettings()
    assert Configured.__record_interface__ == RecordInterfaceSettings(
        add_builder=False, package="gen"
    )
    assert Configured.greeting.__ignore_default__ is True
    assert Configured.port.__record_initializer__ == "DEFAULT_PORT"
    assert Configured().greeting() == "hi"
