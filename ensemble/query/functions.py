"""
Path functions: computed segments that terminate a path.

A path such as ``items.size()`` ends in a function segment that is
evaluated against the node reached so far instead of being used as a key.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator

from .document import NodeKind, kind_of, to_string
from .models import PathError, PathErrorKind

PathFunction = Callable[[Any], Any]


class FunctionError(Exception):
    """Raised by a path function that cannot be applied to a node."""


def size(node: Any) -> int:
    """Number of elements of an array."""
    if kind_of(node) is not NodeKind.ARRAY:
        raise FunctionError(
            f"size() is not applicable to {kind_of(node).value} value {to_string(node)!r}"
        )
    return len(node)


def string(node: Any) -> str:
    return to_string(node)


def size_as_string(node: Any) -> str:
    return string(size(node))


class FunctionRegistry:
    """
    Table of path functions keyed by their segment name.

    Built per engine and passed to the resolver and matcher; there is no
    process-wide table.

    Example:
        registry = FunctionRegistry.default()
        value, error = registry.call("size()", [1, 2])  # (2, None)
    """

    def __init__(self, functions: dict[str, PathFunction] | None = None):
        self._functions: dict[str, PathFunction] = dict(functions or {})

    @classmethod
    def default(cls) -> FunctionRegistry:
        return cls({
            "size()": size,
            "string()": string,
            "sizeAsString()": size_as_string,
        })

    @property
    def names(self) -> list[str]:
        return list(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def call(
        self,
        name: str,
        node: Any,
        path: str = "",
        position: int | None = None,
    ) -> tuple[Any, PathError | None]:
        """
        Evaluate a function on a node.

        Returns:
            Tuple of (value, error). If error is not None, value is None.
        """
        function = self._functions.get(name)
        if function is None:
            return None, PathError(
                kind=PathErrorKind.UNKNOWN_FUNCTION,
                message=f"Unknown function '{name}' on path '{path}'",
                path=path,
                segment=name,
                position=position,
            )

        try:
            return function(node), None
        except FunctionError as e:
            return None, PathError(
                kind=PathErrorKind.FUNCTION_INAPPLICABLE,
                message=f"{e} (path '{path}')",
                path=path,
                segment=name,
                position=position,
            )
