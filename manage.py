#!/usr/bin/env python3
"""
Operate the view cache and analysis metadata from the command line.

Usage:
    python manage.py invalidate STUDY_NAME                          # Purge every cached view of a study
    python manage.py invalidate STUDY_NAME --file-type Cluster --name "tSNE 1"
    python manage.py invalidate STUDY_NAME --dry-run                # List keys that would be purged
    python manage.py analysis STUDY_NAME PROJECT WORKSPACE SUBMISSION_ID [--version 4.6.1] [--api-root URL] [--json]
"""

import sys
from pathlib import Path

# Add project to path
sys.path.insert(0, str(Path(__file__).parent))

from app.container import container
from app.errors import SchemaValidationFailure
from app.models.study import Study, StudyFile
from app.services.cache.keys import removal_key_for_file, removal_key_for_study
from firecloud_client import set_api_config
from settings import DEFAULT_SCHEMA_VERSION, FIRECLOUD_API_TIMEOUT
from settings.logging import setup_logging

logger = setup_logging(to_file=True)


def _option(args: list[str], name: str, default: str | None = None) -> str | None:
    if name in args:
        idx = args.index(name)
        if idx + 1 < len(args):
            return args[idx + 1]
    return default


def run_invalidate(args: list[str]) -> int:
    """Purge a study's cached views, optionally scoped to one file."""
    study = Study(name=args[0], firecloud_project="", firecloud_workspace="")
    file_type = _option(args, "--file-type")

    if file_type:
        file = StudyFile(study=study, file_type=file_type, name=_option(args, "--name", ""))
        removal_key = removal_key_for_file(file)
        if removal_key is None:
            logger.info("No cached views depend on {} files", file_type)
            return 0
    else:
        removal_key = removal_key_for_study(study)

    if "--dry-run" in args:
        keys = container.invalidator.preview(removal_key)
        for key in keys:
            print(key)
        logger.info("{} keys in scope of {}", len(keys), removal_key)
        return 0

    removed = container.invalidator.invalidate(removal_key)
    logger.info("Removed {} cache entries for {}", removed, removal_key)
    return 0


def run_analysis(args: list[str]) -> int:
    """Assemble and store analysis metadata for a finished submission."""
    if len(args) < 4:
        print(__doc__)
        return 1

    study_name, project, workspace, submission_id = args[:4]
    version = _option(args, "--version", DEFAULT_SCHEMA_VERSION)
    api_root = _option(args, "--api-root")
    if api_root:
        set_api_config(api_root, FIRECLOUD_API_TIMEOUT)
    study = Study(name=study_name, firecloud_project=project, firecloud_workspace=workspace)

    try:
        metadatum = container.analysis_metadata.create(study, submission_id, version)
    except SchemaValidationFailure as e:
        for field, messages in e.errors.items():
            print(f"  ⚠️  {field}: {', '.join(messages)}")
        return 1

    print(metadatum.to_json(indent=2) if "--json" in args else f"Saved analysis {metadatum.name} ({submission_id})")
    return 0


def main():
    args = sys.argv[1:]
    if len(args) < 2 or args[0] not in ("invalidate", "analysis"):
        print(__doc__)
        sys.exit(1)

    container.init()
    try:
        if args[0] == "invalidate":
            code = run_invalidate(args[1:])
        else:
            code = run_analysis(args[1:])
    finally:
        container.shutdown()
    sys.exit(code)


if __name__ == "__main__":
    main()
