# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Discover Python sources while honoring ignore rules."""

import logging
from collections.abc import Iterable
from pathlib import Path

import pathspec

logger = logging.getLogger(__name__)

IGNORE_FILE = ".gitignore"


def discover_sources(input_root: Path, exclude: Iterable[str] = ()) -> list[Path]:
    """List Python files beneath a root that are not ignored.

    The tree is walked breadth-first. A directory's ``.gitignore`` is read when
    the walk enters it and applies to that directory's subtree only, so rules
    inside ignored directories and ``.git`` are never read.

    Args:
        input_root: Project root.
        exclude: Gitignore-style patterns relative to the root.

    Returns:
        Sorted Python file paths.

    Raises:
        OSError: If a directory or ``.gitignore`` file cannot be read.
        UnicodeDecodeError: If a ``.gitignore`` file contains invalid UTF-8.
    """
    rules = [rule for rule in (_rebase_rule(line, "") for line in exclude) if rule]
    spec = pathspec.GitIgnoreSpec.from_lines(rules)
    sources: list[Path] = []
    skipped = 0
    queue: list[Path] = [input_root]
    while queue:
        directory = queue.pop(0)
        nested = _read_ignore_rules(directory=directory, input_root=input_root)
        if nested:
            # later rules win, so a subtree's rules override its parents'
            rules.extend(nested)
            spec = pathspec.GitIgnoreSpec.from_lines(rules)
        for child in sorted(directory.iterdir(), key=lambda item: item.name):
            is_dir = child.is_dir()
            if is_dir and child.name == ".git":
                continue
            relative_child = child.relative_to(input_root).as_posix()
            if _is_ignored(spec=spec, relative_path=relative_child, is_dir=is_dir):
                skipped += 1
                continue
            if is_dir:
                queue.append(child)
            elif child.suffix == ".py":
                sources.append(child)
    logger.info(
        f"Source discovery completed (path={input_root} files={len(sources)} "
        f"skipped={skipped} rules={len(rules)})"
    )
    return sorted(sources)


def _read_ignore_rules(directory: Path, input_root: Path) -> list[str]:
    ignore_path = directory / IGNORE_FILE
    if not ignore_path.is_file():
        return []
    base = directory.relative_to(input_root).as_posix()
    lines = ignore_path.read_text(encoding="utf-8").splitlines()
    rules = [rule for rule in (_rebase_rule(line, base) for line in lines) if rule]
    logger.debug(f"Ignore rules loaded (file={ignore_path} rules={len(rules)})")
    return rules


def _rebase_rule(line: str, base: str) -> str | None:
    """Anchor one gitignore rule to the directory holding it.

    Returns:
        The root-relative rule, or ``None`` for blank lines and comments.
    """
    rule = line.strip()
    if not rule or rule.startswith("#"):
        return None
    if base in ("", "."):
        return rule
    negation = "!" if rule.startswith("!") else ""
    body = rule[len(negation):]
    if body.startswith("/") or "/" in body.rstrip("/"):
        return f"{negation}{base}/{body.lstrip('/')}"
    # unanchored rules match at any depth below their directory
    return f"{negation}{base}/**/{body}"


def _is_ignored(spec: pathspec.GitIgnoreSpec, relative_path: str, is_dir: bool) -> bool:
    if spec.match_file(relative_path):
        return True
    return is_dir and spec.match_file(f"{relative_path}/")
