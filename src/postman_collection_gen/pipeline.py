"""Generator pipeline: select files, extract requests, write the Postman documents."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from postman_collection_gen.config import GeneratorSettings
from postman_collection_gen.generator.collection import build_documents
from postman_collection_gen.generator.serialize import stable_dumps
from postman_collection_gen.logger import get_logger
from postman_collection_gen.scanner.base import RequestRecord
from postman_collection_gen.scanner.extract import extract_requests_from_file
from postman_collection_gen.scanner.selector import select_source_files

logger = get_logger(__name__)


class GenerationReport(BaseModel):
    """Summary of one generator run."""

    root_dir: Path
    file_count: int
    record_count: int
    collection_path: Path
    environment_path: Path


def collect_requests(settings: GeneratorSettings) -> tuple[list[Path], list[RequestRecord]]:
    """Select source files and extract their requests, in file order."""
    files = select_source_files(settings.root_path, settings.extensions, settings.skip_dirs)
    logger.info("Selected %d source files under %s", len(files), settings.root_path)

    records: list[RequestRecord] = []
    for path in files:
        records.extend(extract_requests_from_file(path, settings.client_name))
    return files, records


def run_generator(settings: GeneratorSettings, exported_at: datetime | None = None) -> GenerationReport:
    """Run the full pipeline and write both documents.

    Raises:
        OSError: if the output directory or files cannot be written.
    """
    settings.out_path.mkdir(parents=True, exist_ok=True)

    files, records = collect_requests(settings)
    collection, environment = build_documents(
        records,
        collection_name=settings.collection_name,
        environment_name=settings.environment_name,
        base_dir=settings.base_dir,
        exported_at=exported_at,
    )

    settings.collection_path.write_text(stable_dumps(collection), encoding="utf-8")
    settings.environment_path.write_text(stable_dumps(environment), encoding="utf-8")
    logger.info("Wrote %d requests to %s", len(records), settings.collection_path)

    return GenerationReport(
        root_dir=settings.root_path,
        file_count=len(files),
        record_count=len(records),
        collection_path=settings.collection_path,
        environment_path=settings.environment_path,
    )
