"""Turn JavaScript expression nodes into JSON-compatible values.

Two modes share the node helpers below:

- ``to_url_template`` accepts only string and template literals and returns
  ``None`` for anything else. Template substitutions become ``{{name}}`` for a
  bare identifier and ``{{VAR}}`` otherwise.
- ``to_json_value`` accepts a closed set of literal node types and degrades
  every other expression to the ``{{VALUE}}`` placeholder. It never fails.

Nothing is evaluated; identifiers are treated as runtime variables and
rendered as ``{{name}}`` placeholders for a human to fill in.
"""

import math
import re
from collections.abc import Callable

from tree_sitter import Node

from postman_collection_gen.scanner.base import JsonValue
from postman_collection_gen.scanner.source import node_text

VALUE_PLACEHOLDER = "{{VALUE}}"
VAR_PLACEHOLDER = "{{VAR}}"
DEFAULT_KEY = "key"

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}
_LEGACY_OCTAL_RE = re.compile(r"0[0-7]+")


def placeholder(name: str) -> str:
    return "{{" + name + "}}"


# Template mode ___________________________________________________________________________________

def to_url_template(node: Node | None) -> str | None:
    """Reconstruct a URL expression as a string, or None if it is not a literal."""
    node = _unwrap(node)
    if node is None:
        return None
    if node.type == "string":
        return _string_value(node)
    if node.type == "template_string":
        return _template_value(node)
    return None


def _template_value(node: Node) -> str:
    """Concatenate cooked literal segments with a placeholder per substitution."""
    raw = node.text
    offset = node.start_byte
    parts = []
    cursor = node.start_byte + 1  # skip opening backtick
    for child in node.named_children:
        if child.type != "template_substitution":
            continue
        parts.append(_cook(raw[cursor - offset:child.start_byte - offset].decode("utf-8")))
        parts.append(_substitution_placeholder(child))
        cursor = child.end_byte
    parts.append(_cook(raw[cursor - offset:node.end_byte - 1 - offset].decode("utf-8")))
    return "".join(parts)


def _substitution_placeholder(node: Node) -> str:
    expression = _unwrap(_first_expression(node))
    if expression is not None and expression.type in ("identifier", "undefined"):
        return placeholder(node_text(expression))
    return VAR_PLACEHOLDER


# Generic mode ____________________________________________________________________________________

def to_json_value(node: Node | None) -> JsonValue:
    """Reconstruct a literal expression as a JSON-compatible value.

    A missing node yields None; unsupported expressions yield ``{{VALUE}}``.
    """
    node = _unwrap(node)
    if node is None:
        return None
    handler = _GENERIC_HANDLERS.get(node.type, _unsupported)
    return handler(node)


def _unsupported(node: Node) -> JsonValue:
    return VALUE_PLACEHOLDER


def _identifier_value(node: Node) -> JsonValue:
    return placeholder(node_text(node))


def _number_value(node: Node) -> JsonValue:
    value = parse_number(node_text(node))
    if value is None:
        return VALUE_PLACEHOLDER
    if isinstance(value, float) and not math.isfinite(value):
        return None  # JSON has no Infinity
    return value


def _object_value(node: Node) -> JsonValue:
    result = {}
    for child in node.named_children:
        if child.type == "pair":
            key = _property_key(child.child_by_field_name("key"))
            result[key] = to_json_value(child.child_by_field_name("value"))
        elif child.type == "shorthand_property_identifier":
            name = node_text(child)
            result[name] = placeholder(name)
        # spread elements, methods and comments carry no static key
    return result


def _property_key(node: Node | None) -> str:
    if node is None:
        return DEFAULT_KEY
    if node.type == "property_identifier":
        return node_text(node)
    if node.type == "string":
        return _string_value(node)
    return DEFAULT_KEY


def _array_value(node: Node) -> JsonValue:
    """Elements in order; an elision such as the gap in ``[1,,2]`` becomes None."""
    result = []
    has_element = False
    for child in node.children:
        if child.type == ",":
            if not has_element:
                result.append(None)
            has_element = False
        elif child.is_named and child.type != "comment":
            result.append(to_json_value(child))
            has_element = True
    return result


# Shared helpers __________________________________________________________________________________

def _unwrap(node: Node | None) -> Node | None:
    """Strip redundant parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression":
        node = _first_expression(node)
    return node


def _first_expression(node: Node) -> Node | None:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _string_value(node: Node) -> str:
    return _cook(node_text(node)[1:-1])


def _cook(raw: str) -> str:
    """Apply JavaScript escape sequences to the raw text of a string literal."""
    if "\\" not in raw:
        return raw
    cooked = _ESCAPE_RE.sub(_cook_escape, raw)
    # join surrogate pairs written as two \\u escapes
    return cooked.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def _cook_escape(match: re.Match) -> str:
    seq = match.group(1)
    if seq in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[seq]
    if seq in _LINE_CONTINUATIONS:
        return ""
    if seq.startswith("u{"):
        code = int(seq[2:-1], 16)
        return chr(code) if code <= 0x10FFFF else "\ufffd"
    if len(seq) > 1 and seq[0] in "ux":
        return chr(int(seq[1:], 16))
    if seq[0] in "01234567":
        return chr(int(seq, 8))
    return seq


def parse_number(text: str) -> int | float | None:
    """Parse a JavaScript numeric literal; returns None for BigInt literals."""
    text = text.replace("_", "")
    lowered = text.lower()
    if lowered.endswith("n"):
        return None
    if lowered.startswith("0x"):
        return int(text[2:], 16)
    if lowered.startswith("0o"):
        return int(text[2:], 8)
    if lowered.startswith("0b"):
        return int(text[2:], 2)
    if _LEGACY_OCTAL_RE.fullmatch(text):
        return int(text, 8)
    try:
        value = float(text)
    except ValueError:
        return None
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


_GENERIC_HANDLERS: dict[str, Callable[[Node], JsonValue]] = {
    "string": _string_value,
    "number": _number_value,
    "true": lambda node: True,
    "false": lambda node: False,
    "null": lambda node: None,
    "identifier": _identifier_value,
    "undefined": _identifier_value,
    "object": _object_value,
    "array": _array_value,
}
