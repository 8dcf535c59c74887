"""
Case-level variables and value templates.

Variables come from the process environment (``env:NAME``), the run
context (``ctx:base_url``), call ``args`` and values remembered from
earlier responses. Placeholders look like ``{name}``; after they are
expanded, template calls such as ``{{ sha1('{username}') }}`` are
evaluated.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import os
import re
import time
from typing import Any, Callable, Mapping

from ..query.document import to_string

logger = logging.getLogger(__name__)

BASE_URL_VAR = "ctx:base_url"
ENV_PREFIX = "env:"

_PLACEHOLDER = re.compile(r"\{([^{}\s]+)\}")
_TEMPLATE = re.compile(r"\{\{(.*?)\}\}")
_TEMPLATE_CALL = re.compile(r"""^\s*(\w+)\s*\(\s*(?:'([^']*)'|"([^"]*)")?\s*\)\s*$""")


class TemplateError(ValueError):
    """A ``{{ ... }}`` template could not be parsed or evaluated."""
    pass


# ─────────────────────────────────────────────────────────────────────────────
# Template Functions
# ─────────────────────────────────────────────────────────────────────────────

def _base64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def _sha1(value: str) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()


def _timestamp(value: str = "") -> str:
    return str(int(time.time()))


TEMPLATE_FUNCTIONS: dict[str, Callable[..., str]] = {
    "base64": _base64,
    "sha1": _sha1,
    "timestamp": _timestamp,
}


def render_template(text: str) -> str:
    """
    Evaluate every ``{{ func('arg') }}`` call in ``text``.

    Raises:
        TemplateError: On malformed calls or unknown functions
    """
    def evaluate(match: re.Match) -> str:
        expression = match.group(1)
        call = _TEMPLATE_CALL.match(expression)
        if call is None:
            raise TemplateError(f"cannot parse value template: {{{{{expression}}}}}")

        name = call.group(1)
        function = TEMPLATE_FUNCTIONS.get(name)
        if function is None:
            raise TemplateError(
                f"cannot evaluate value template: unknown function '{name}'. "
                f"Available: {', '.join(sorted(TEMPLATE_FUNCTIONS))}"
            )

        argument = call.group(2) if call.group(2) is not None else call.group(3)
        if argument is None:
            return function()
        return function(argument)

    return _TEMPLATE.sub(evaluate, text)


# ─────────────────────────────────────────────────────────────────────────────
# Vars
# ─────────────────────────────────────────────────────────────────────────────

class Vars:
    """
    Variables visible to the calls of one case.

    Example:
        vars = Vars(base_url="http://localhost:8080")
        vars.add("order-id", 555)
        vars.add("username", "Smith")
        vars.apply_to("{username} owns order #{order-id}")
        # "Smith owns order #555"
    """

    def __init__(self, base_url: str = "", environ: Mapping[str, str] | None = None):
        self._items: dict[str, Any] = {}

        if environ is None:
            environ = os.environ
        for name, value in environ.items():
            self._items[ENV_PREFIX + name] = value

        self._items[BASE_URL_VAR] = base_url

    def __contains__(self, name: str) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def get(self, name: str, default: Any = None) -> Any:
        return self._items.get(name, default)

    def add(self, name: str, value: Any) -> None:
        """Add a variable; string values are expanded right away."""
        if isinstance(value, str):
            value = self.apply_to(value)
        self._items[name] = value

    def add_all(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.add(name, value)

    def expand(self, text: str) -> str:
        """Replace ``{name}`` placeholders, leaving unknown names as they are."""
        return self._expand(text, frozenset())

    def _expand(self, text: str, resolving: frozenset[str]) -> str:
        def replace(match: re.Match) -> str:
            name = match.group(1)
            if name not in self._items or name in resolving:
                return match.group(0)
            return self._expand(to_string(self._items[name]), resolving | {name})

        return _PLACEHOLDER.sub(replace, text)

    def apply_to(self, text: str) -> str:
        """
        Expand variables, then evaluate templates.

        Raises:
            TemplateError: If a template in the expanded text is invalid
        """
        return render_template(self.expand(text))

    def apply_to_value(self, value: Any) -> Any:
        """
        Apply to every string inside a document; other values pass through.

        A string made of a single placeholder takes the variable's own
        value, so a remembered number stays a number.
        """
        if isinstance(value, str):
            match = _PLACEHOLDER.fullmatch(value)
            if match and not isinstance(self._items.get(match.group(1)), (str, type(None))):
                return self._items[match.group(1)]
            return self.apply_to(value)
        if isinstance(value, dict):
            return {key: self.apply_to_value(item) for key, item in value.items()}
        if isinstance(value, list):
            return [self.apply_to_value(item) for item in value]
        return value

    def __repr__(self) -> str:
        names = [name for name in self._items if not name.startswith(ENV_PREFIX)]
        return f"Vars({', '.join(names)})"
