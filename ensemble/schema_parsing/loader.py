"""
Suite loader for test suites.

This module provides the public API for discovering, loading and
validating suite files from disk or from strings.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterator

import yaml

from .models import Suite
from .parser import SchemaParser
from .validation import SchemaValidator, ValidationResult, is_suite_shape

logger = logging.getLogger(__name__)

SUITE_EXTENSIONS = (".json", ".yaml", ".yml")

BOOL_TAG = "tag:yaml.org,2002:bool"


class SuiteYAMLLoader(yaml.SafeLoader):
    """
    SafeLoader reading only true/false as booleans.

    YAML 1.1 also resolves on/off/yes/no to booleans, which would turn
    the `on:` key of every call into `True`.
    """


SuiteYAMLLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
SuiteYAMLLoader.add_implicit_resolver(
    BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def load_yaml(text: str) -> Any:
    """Parse YAML text with `SuiteYAMLLoader`."""
    return yaml.load(text, Loader=SuiteYAMLLoader)


def _read_data(path: Path) -> tuple[Any, ValidationResult]:
    """Read a JSON or YAML file, reporting syntax errors as validation errors."""
    result = ValidationResult()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        result.add_error(str(path), f"Cannot read file: {e}")
        return None, result

    if path.suffix == ".json":
        try:
            return json.loads(text), result
        except json.JSONDecodeError as e:
            result.add_error(
                str(path),
                f"Invalid JSON syntax: {e}",
                suggestion="Check for trailing commas and unquoted keys"
            )
            return None, result

    try:
        return load_yaml(text), result
    except yaml.YAMLError as e:
        result.add_error(
            str(path),
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result


def _suite_dir(path: Path, root: Path | None) -> str:
    if root is None:
        return "."
    try:
        relative = path.parent.resolve().relative_to(root.resolve())
    except ValueError:
        return "."
    return relative.as_posix()


def load_suite(path: str | Path, root: str | Path | None = None) -> tuple[Suite | None, ValidationResult]:
    """
    Load and validate a suite from a JSON or YAML file.

    Args:
        path: Path to the suite file
        root: Suite root directory; the suite's package name is the
            file's directory relative to it

    Returns:
        Tuple of (Suite or None, ValidationResult)
        If validation fails, Suite will be None.

    Example:
        suite, result = load_suite("suites/orders/create.yaml", root="suites")
        if not result.is_valid:
            print(result)
        # suite.full_name == "orders.create"
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    data, result = _read_data(path)
    if not result.is_valid:
        return None, result

    return _build_suite(data, name=path.stem, dir=_suite_dir(path, Path(root) if root else None), path=path)


def validate_suite_text(
    text: str,
    name: str = "suite",
) -> tuple[Suite | None, ValidationResult]:
    """
    Validate a suite from a YAML (or JSON) string (useful for testing).

    Args:
        text: Suite content as a string
        name: Name given to the parsed suite

    Returns:
        Tuple of (Suite or None, ValidationResult)
    """
    try:
        data = load_yaml(text)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error("yaml", f"Invalid YAML syntax: {e}")
        return None, result

    return _build_suite(data, name=name)


def _build_suite(
    data: Any,
    name: str,
    dir: str = ".",
    path: Path | None = None,
) -> tuple[Suite | None, ValidationResult]:
    validator = SchemaValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    parser = SchemaParser(data, name=name, dir=dir, path=path)
    return parser.parse(), result


def discover_suite_files(root: str | Path) -> list[Path]:
    """
    Every JSON/YAML file under ``root``, sorted for a stable run order.

    A single file may be given instead of a directory.
    """
    root = Path(root)
    if root.is_file():
        return [root]
    return sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.suffix in SUITE_EXTENSIONS
    )


def load_suites(root: str | Path) -> Iterator[tuple[Path, Suite | None, ValidationResult]]:
    """
    Discover and load every suite under ``root``.

    Files that do not have the shape of a suite (a list of objects with
    ``calls``) are skipped silently: suite directories usually also hold
    request payloads and JSON schemas.

    Yields:
        Tuples of (file path, Suite or None, ValidationResult)
    """
    root = Path(root)
    base = root if root.is_dir() else root.parent

    for path in discover_suite_files(root):
        data, result = _read_data(path)
        if not result.is_valid:
            logger.warning(f"Skipping unreadable file {path}")
            yield path, None, result
            continue

        if not is_suite_shape(data):
            logger.debug(f"Skipping {path}: not a suite")
            continue

        suite, result = _build_suite(data, name=path.stem, dir=_suite_dir(path, base), path=path)
        yield path, suite, result
