"""
Typed data structures for test suites.

This module contains the dataclasses that represent the internal typed
structure of a parsed suite file: a suite holds cases, a case holds the
calls it makes in order.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..query.document import MISSING

if TYPE_CHECKING:
    from ..runner.vars import Vars


# ─────────────────────────────────────────────────────────────────────────────
# Request
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class On:
    """Description of the HTTP request a call makes."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    body: Any = None  # inline body: string, or object/array sent as JSON
    body_file: str | None = None  # relative to the suite file

    def populate_with(self, vars: Vars) -> On:
        """Copy with variables substituted in url, headers, params and body."""
        return dataclasses.replace(
            self,
            url=vars.apply_to(self.url),
            headers={name: vars.apply_to(value) for name, value in self.headers.items()},
            params={name: vars.apply_to(value) for name, value in self.params.items()},
            body=vars.apply_to_value(self.body),
            body_file=vars.apply_to(self.body_file) if self.body_file else None,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Expectations
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Expect:
    """What the response of a call must look like."""
    status_code: int | None = None
    content_type: str | None = None  # shortcut for the Content-Type header
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)  # path -> expected value
    body_equals: Any = MISSING
    strict_body: bool = False
    absent: list[str] = field(default_factory=list)
    present: list[str] = field(default_factory=list)
    body_schema_file: str | None = None
    body_schema_uri: str | None = None

    @property
    def has_schema(self) -> bool:
        return bool(self.body_schema_file or self.body_schema_uri)

    @property
    def has_body_equals(self) -> bool:
        return self.body_equals is not MISSING

    def populate_with(self, vars: Vars) -> Expect:
        """
        Copy with variables substituted in expected values.

        Only strings (and strings inside lists) are substituted; numbers
        and booleans are left alone.
        """
        return dataclasses.replace(
            self,
            content_type=vars.apply_to(self.content_type) if self.content_type else None,
            headers={name: vars.apply_to(value) for name, value in self.headers.items()},
            body={path: vars.apply_to_value(value) for path, value in self.body.items()},
            body_equals=vars.apply_to_value(self.body_equals),
            body_schema_file=vars.apply_to(self.body_schema_file) if self.body_schema_file else None,
            body_schema_uri=vars.apply_to(self.body_schema_uri) if self.body_schema_uri else None,
        )


@dataclass
class Remember:
    """Values to keep from a response for later calls of the same case."""
    body: dict[str, str] = field(default_factory=dict)  # variable -> body path
    headers: dict[str, str] = field(default_factory=dict)  # variable -> header name


# ─────────────────────────────────────────────────────────────────────────────
# Suite Structure
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Call:
    """One request and the checks on its response."""
    on: On
    expect: Expect = field(default_factory=Expect)
    args: dict[str, Any] = field(default_factory=dict)
    remember: Remember = field(default_factory=Remember)


@dataclass
class Case:
    """A named scenario: calls run in order, sharing variables."""
    name: str
    calls: list[Call] = field(default_factory=list)
    ignore: str | None = None  # reason to skip

    @property
    def ignored(self) -> bool:
        return self.ignore is not None


@dataclass
class Suite:
    """
    One suite file.

    Attributes:
        name: File name without extension
        dir: Directory of the file relative to the suite root
        path: Location of the file on disk
        cases: Cases listed in the file
    """
    name: str
    dir: str = "."
    path: Path | None = None
    cases: list[Case] = field(default_factory=list)

    @property
    def package_name(self) -> str:
        """Dotted package name derived from the suite directory."""
        if self.dir.startswith("."):
            return ""
        return self.dir.replace("\\", "/").strip("/").replace("/", ".")

    @property
    def full_name(self) -> str:
        package = self.package_name
        if not package:
            return self.name
        return f"{package}.{self.name}"

    @property
    def base_dir(self) -> Path:
        """Directory that relative body and schema files resolve from."""
        if self.path is not None:
            return self.path.parent
        return Path(self.dir)
