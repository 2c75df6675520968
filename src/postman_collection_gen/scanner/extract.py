"""Call-site extraction.

Finds ``<client>.<method>(url, body?)`` calls in a parsed source file and
turns each into a RequestRecord. Only shorthand calls on the bare client
identifier are recognised (``axios.post(...)``); ``api.post(...)``,
``axios.request({...})`` or ``this.axios.get(...)`` are not.
"""

from collections.abc import Iterator
from pathlib import Path

from tree_sitter import Node, Tree

from postman_collection_gen.errors import SourceParseError
from postman_collection_gen.logger import get_logger
from postman_collection_gen.scanner.base import BODY_METHODS, HttpMethod, RequestRecord
from postman_collection_gen.scanner.literal import to_json_value, to_url_template
from postman_collection_gen.scanner.source import node_text, parse_source

logger = get_logger(__name__)

DEFAULT_CLIENT = "axios"
BODY_PLACEHOLDER = "{{BODY}}"


def extract_requests_from_file(path: Path, client_name: str = DEFAULT_CLIENT) -> list[RequestRecord]:
    """Read, parse and extract one file. Unreadable or unparsable files yield no records."""
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.warning("Skipping %s: cannot read file (%s)", path, e)
        return []

    try:
        tree = parse_source(data)
    except SourceParseError as e:
        logger.warning("Skipping %s: %s", path, e)
        return []

    records = extract_requests(tree, path, client_name)
    logger.debug("%s: %d requests", path, len(records))
    return records


def extract_requests(tree: Tree, source_path: Path, client_name: str = DEFAULT_CLIENT) -> list[RequestRecord]:
    """Return a record for every recognised call, in source order."""
    records = []
    for call in _iter_calls(tree.root_node):
        record = _record_from_call(call, source_path, client_name)
        if record is not None:
            records.append(record)
    return records


def _iter_calls(root: Node) -> Iterator[Node]:
    """Yield call expressions in pre-order (outer calls before their arguments)."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "call_expression":
            yield node
        stack.extend(reversed(node.named_children))


def _record_from_call(call: Node, source_path: Path, client_name: str) -> RequestRecord | None:
    if call.child_by_field_name("optional_chain") is not None:
        return None
    method = _client_method(call.child_by_field_name("function"), client_name)
    if method is None:
        return None

    arguments = call.child_by_field_name("arguments")
    # a template string here is a tagged template, not a call
    if arguments is None or arguments.type != "arguments":
        return None
    args = [arg for arg in arguments.named_children if arg.type != "comment"]

    url = to_url_template(args[0] if args else None)
    if not url:
        return None

    body = None
    if method in BODY_METHODS:
        body = to_json_value(args[1] if len(args) > 1 else None)
        if body is None:
            body = BODY_PLACEHOLDER

    return RequestRecord(source_path=source_path, method=method, url_template=url, body=body)


def _client_method(callee: Node | None, client_name: str) -> HttpMethod | None:
    """Return the HTTP method for ``<client_name>.<method>``, else None."""
    if callee is None or callee.type != "member_expression":
        return None
    if callee.child_by_field_name("optional_chain") is not None:
        return None

    obj = callee.child_by_field_name("object")
    if obj is None or obj.type != "identifier" or node_text(obj) != client_name:
        return None

    prop = callee.child_by_field_name("property")
    if prop is None or prop.type != "property_identifier":
        return None
    return HttpMethod.from_name(node_text(prop))
