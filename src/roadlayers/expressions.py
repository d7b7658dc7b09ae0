"""Declarative style expressions and their in-process evaluation.

Layer filters and paint values are kept as MapLibre style expressions
(nested JSON lists such as ``["==", ["get", "class"], "motorway"]``) so that
every layer stays serializable. The evaluator below implements the subset of
the expression language this package emits, which lets the same expression
be checked against a single feature without a rendering engine.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias


__all__ = [
    "ALWAYS",
    "Expression",
    "ExpressionError",
    "Feature",
    "Predicate",
    "evaluate",
]

# JSON-compatible nested lists and scalars
Expression: TypeAlias = Any
Feature: TypeAlias = Mapping[str, Any]

_Handler: TypeAlias = Callable[[list[Any], Feature, "float | None"], Any]


class ExpressionError(ValueError):
    """Raised when an expression is malformed or cannot be evaluated."""


def _expect_args(operator: str, args: list[Any], count: int) -> None:
    if len(args) != count:
        raise ExpressionError(
            f"'{operator}' expects {count} argument(s), got {len(args)}: {args!r}"
        )


def _literal(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    _expect_args("literal", args, 1)
    return copy.deepcopy(args[0])


def _get(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    _expect_args("get", args, 1)
    return feature.get(args[0])


def _has(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("has", args, 1)
    return args[0] in feature


def _coalesce(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    for arg in args:
        value = evaluate(arg, feature, zoom)
        if value is not None:
            return value
    return None


def _to_boolean(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("to-boolean", args, 1)
    return bool(evaluate(args[0], feature, zoom))


def _not(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("!", args, 1)
    return not evaluate(args[0], feature, zoom)


def _equal(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("==", args, 2)
    return bool(evaluate(args[0], feature, zoom) == evaluate(args[1], feature, zoom))


def _not_equal(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("!=", args, 2)
    return bool(evaluate(args[0], feature, zoom) != evaluate(args[1], feature, zoom))


def _all(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    # Left to right, stopping at the first false operand
    return all(evaluate(arg, feature, zoom) for arg in args)


def _any(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    return any(evaluate(arg, feature, zoom) for arg in args)


def _in(args: list[Any], feature: Feature, zoom: float | None) -> bool:
    _expect_args("in", args, 2)
    needle = evaluate(args[0], feature, zoom)
    haystack = evaluate(args[1], feature, zoom)
    if needle is None:
        return False
    if isinstance(haystack, str):
        return isinstance(needle, str) and needle in haystack
    if isinstance(haystack, list):
        return needle in haystack
    raise ExpressionError(f"'in' expects a list or string haystack, got {haystack!r}")


def _match(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    # input, label, output, ..., fallback
    if len(args) < 4 or len(args) % 2:
        raise ExpressionError(f"Malformed 'match' expression: {args!r}")
    value = evaluate(args[0], feature, zoom)
    pairs = args[1:-1]
    for label, output in zip(pairs[::2], pairs[1::2]):
        labels = label if isinstance(label, list) else [label]
        if value is not None and value in labels:
            return evaluate(output, feature, zoom)
    return evaluate(args[-1], feature, zoom)


def _case(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    # condition, output, ..., fallback
    if len(args) < 3 or not len(args) % 2:
        raise ExpressionError(f"Malformed 'case' expression: {args!r}")
    pairs = args[:-1]
    for condition, output in zip(pairs[::2], pairs[1::2]):
        if evaluate(condition, feature, zoom):
            return evaluate(output, feature, zoom)
    return evaluate(args[-1], feature, zoom)


def _step(args: list[Any], feature: Feature, zoom: float | None) -> Any:
    # input, output0, stop1, output1, ...
    if len(args) < 2 or len(args) % 2:
        raise ExpressionError(f"Malformed 'step' expression: {args!r}")
    value = evaluate(args[0], feature, zoom)
    selected = args[1]
    for stop, output in zip(args[2::2], args[3::2]):
        if value < stop:
            break
        selected = output
    return evaluate(selected, feature, zoom)


def _zoom(args: list[Any], feature: Feature, zoom: float | None) -> float:
    _expect_args("zoom", args, 0)
    if zoom is None:
        raise ExpressionError("Expression depends on ['zoom'] but no zoom level was given.")
    return zoom


_OPERATORS: dict[str, _Handler] = {
    "literal": _literal,
    "get": _get,
    "has": _has,
    "coalesce": _coalesce,
    "to-boolean": _to_boolean,
    "!": _not,
    "==": _equal,
    "!=": _not_equal,
    "all": _all,
    "any": _any,
    "in": _in,
    "match": _match,
    "case": _case,
    "step": _step,
    "zoom": _zoom,
}


def evaluate(expression: Expression, feature: Feature, zoom: float | None = None) -> Any:
    """Evaluate an expression against a single feature.

    Args:
        expression: A MapLibre style expression or a bare scalar.
        feature: The feature properties, keyed by attribute name.
        zoom: The zoom level, needed only by ``["zoom"]``.

    Returns:
        The value the expression yields for this feature.

    Raises:
        ExpressionError: If the expression is malformed, uses an unsupported
            operator, or needs a zoom level that was not given.
    """
    if isinstance(expression, list):
        if not expression or not isinstance(expression[0], str):
            raise ExpressionError(f"Expression must start with an operator name: {expression!r}")
        handler = _OPERATORS.get(expression[0])
        if handler is None:
            raise ExpressionError(f"Unsupported expression operator '{expression[0]}'.")
        return handler(expression[1:], feature, zoom)
    if isinstance(expression, dict):
        raise ExpressionError("Object values must be wrapped in a 'literal' expression.")
    return expression


@dataclass(frozen=True)
class Predicate:
    """A boolean expression that can be called on a feature."""

    expression: Expression

    def __call__(self, feature: Feature, zoom: float | None = None) -> bool:
        return bool(evaluate(self.expression, feature, zoom))

    def to_json(self) -> Expression:
        """Return an independent copy of the underlying expression."""
        return copy.deepcopy(self.expression)


ALWAYS = Predicate(True)
