"""Postman Collection v2.1 and environment template builders.

Produces plain dicts; ``serialize.stable_dumps`` turns them into the files on
disk. The collection is deterministic for a given set of records. The
environment template embeds the export time and therefore differs between
runs.
"""

import os
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from postman_collection_gen.generator.serialize import stable_dumps
from postman_collection_gen.scanner.base import RequestRecord

POSTMAN_SCHEMA = "https://schema.getpostman.com/json/collection/v2.1.0/collection.json"
BASE_URL_PLACEHOLDER = "{{API_BASE_URL}}"
EXPORTED_USING = "generate_postman_schema"

DEFAULT_COLLECTION_NAME = "Reap API Tools (Generated)"
DEFAULT_ENVIRONMENT_NAME = "Reap API (Template)"

# Sent with every request, whatever its method.
DEFAULT_HEADERS = (
    ("x-reap-api-key", "{{API_KEY}}"),
    ("Accept-Version", "{{ACCEPT_VERSION}}"),
    ("Content-Type", "application/json"),
    ("accept", "application/json"),
)

DEFAULT_VARIABLES = ("API_BASE_URL", "API_KEY", "ACCEPT_VERSION", "WEBHOOK_SUBSCRIBE_URL")


def sort_records(records: Iterable[RequestRecord]) -> list[RequestRecord]:
    """Order records by (url template, method, source path)."""
    return sorted(records, key=lambda record: record.sort_key)


def relative_path(path: Path, base_dir: Path) -> str:
    """Path of ``path`` relative to ``base_dir``, with forward slashes."""
    try:
        rel = os.path.relpath(path, base_dir)
    except ValueError:
        # different drive on Windows
        rel = str(path)
    return rel.replace("\\", "/")


def request_name(record: RequestRecord, base_dir: Path) -> str:
    return f"{record.method.value} {record.url_template} ({relative_path(record.source_path, base_dir)})"


def build_url(raw: str) -> dict:
    """Build a Postman url object; templates on {{API_BASE_URL}} get host and path parts."""
    url: dict = {"raw": raw}
    if raw.startswith(BASE_URL_PLACEHOLDER):
        rest = raw[len(BASE_URL_PLACEHOLDER):]
        url["host"] = [BASE_URL_PLACEHOLDER]
        url["path"] = [segment for segment in rest.split("?")[0].split("/") if segment]
    return url


def build_item(record: RequestRecord, base_dir: Path) -> dict:
    request: dict = {
        "method": record.method.value,
        "header": [{"key": key, "value": value} for key, value in DEFAULT_HEADERS],
        "url": build_url(record.url_template),
    }
    if record.body is not None:
        request["body"] = {
            "mode": "raw",
            "raw": stable_dumps(record.body).rstrip(),
            "options": {"raw": {"language": "json"}},
        }
    return {"name": request_name(record, base_dir), "request": request}


def build_collection(
    records: Iterable[RequestRecord],
    name: str = DEFAULT_COLLECTION_NAME,
    base_dir: Path | None = None,
) -> dict:
    """Build the collection document with one item per record, sorted."""
    base_dir = Path.cwd() if base_dir is None else base_dir
    return {
        "info": {"name": name, "schema": POSTMAN_SCHEMA},
        "variable": [{"key": key, "value": ""} for key in DEFAULT_VARIABLES],
        "item": [build_item(record, base_dir) for record in sort_records(records)],
    }


def build_environment(name: str = DEFAULT_ENVIRONMENT_NAME, exported_at: datetime | None = None) -> dict:
    """Build the environment template mirroring the collection variables."""
    exported_at = datetime.now(timezone.utc) if exported_at is None else exported_at
    return {
        "name": name,
        "values": [
            {"key": key, "value": "", "enabled": True, "type": "default"}
            for key in DEFAULT_VARIABLES
        ],
        "_postman_variable_scope": "environment",
        "_postman_exported_at": _iso_timestamp(exported_at),
        "_postman_exported_using": EXPORTED_USING,
    }


def build_documents(
    records: Iterable[RequestRecord],
    collection_name: str = DEFAULT_COLLECTION_NAME,
    environment_name: str = DEFAULT_ENVIRONMENT_NAME,
    base_dir: Path | None = None,
    exported_at: datetime | None = None,
) -> tuple[dict, dict]:
    """Build both the collection and its environment template."""
    return (
        build_collection(records, name=collection_name, base_dir=base_dir),
        build_environment(name=environment_name, exported_at=exported_at),
    )


def _iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return f"{moment:%Y-%m-%dT%H:%M:%S}.{moment.microsecond // 1000:03d}Z"
