#!/usr/bin/env python3
"""
Ebook Import Script.

Reads a JSON file holding a list of creation payloads (the same shape as
POST /api/v1/ebooks) and runs each one through the field validator and the
creation service against the configured repository. Every entry is an
independent creation: a failure is reported and the import moves on.

Usage:
    EBOOK_REPOSITORY=sqlite python -m scripts.import_ebooks --file seed.json
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ebookstore.api.v1.converters import request_to_domain
from ebookstore.api.v1.dependencies import Container, build_container
from ebookstore.config import Settings
from ebookstore.domain.errors import (
    DuplicateEntity,
    GenerationFailed,
    MalformedPayload,
    PersistenceFailed,
    ValidationFailed,
)
from ebookstore.logging_config import configure_logging

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of one import run."""

    created: List[str] = field(default_factory=list)
    """Ids of created ebooks, in input order"""

    rejected: Dict[int, str] = field(default_factory=dict)
    """Input position -> reason"""

    failed: Dict[int, str] = field(default_factory=dict)
    """Input position -> infrastructure failure"""

    @property
    def ok(self) -> bool:
        return not self.failed


def import_payloads(payloads: List[Any], container: Container) -> ImportReport:
    """
    Create one ebook per payload.

    Args:
        payloads: Decoded JSON entries
        container: Wired dependencies

    Returns:
        ImportReport with per-entry outcomes
    """
    report = ImportReport()

    for position, payload in enumerate(payloads):
        try:
            request = container.validator.parse(payload)
            created = container.creation_service.create_ebook(request_to_domain(request))
        except MalformedPayload:
            report.rejected[position] = "malformed payload"
        except ValidationFailed as e:
            report.rejected[position] = f"validation failed: {sorted(e.fields)}"
        except DuplicateEntity as e:
            report.rejected[position] = f"duplicate: {e}"
        except (PersistenceFailed, GenerationFailed) as e:
            logger.error("Entry %d failed: %s", position, e)
            report.failed[position] = str(e)
        else:
            report.created.append(created.id)

    return report


def main(file_path: Path, settings: Optional[Settings] = None) -> ImportReport:
    """
    Main entry point for the import script.

    Raises:
        ValueError: If the file does not contain a JSON list
    """
    settings = settings or Settings.from_env()
    payloads = json.loads(Path(file_path).read_text(encoding="utf-8"))
    if not isinstance(payloads, list):
        raise ValueError(f"{file_path} must contain a JSON list of ebook payloads")

    logger.info("Importing %d ebooks into the %s repository", len(payloads), settings.repository)
    report = import_payloads(payloads, build_container(settings))
    logger.info(
        "Import finished: %d created, %d rejected, %d failed",
        len(report.created),
        len(report.rejected),
        len(report.failed),
    )
    for position, reason in sorted(report.rejected.items()):
        logger.warning("Entry %d rejected: %s", position, reason)

    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import ebooks from a JSON file")
    parser.add_argument(
        "--file", "-f",
        type=Path,
        required=True,
        help="JSON file with a list of ebook creation payloads",
    )

    args = parser.parse_args()
    env_settings = Settings.from_env()
    configure_logging(env_settings.log_level)
    result = main(args.file, env_settings)
    sys.exit(0 if result.ok else 1)
