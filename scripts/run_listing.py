"""CLI entrypoint to list datasets and tables or start an extract job."""

from __future__ import annotations

import argparse
import json
import logging
import os
import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from bqclient.client import Client
from bqclient.config import ClientConfig, DEFAULT_CONFIG
from bqclient.models import Compression, DestinationFormat, GCSReference


def load_env_file(env_path: str = ".env") -> None:
    """Load environment variables from .env file."""
    env_file = Path(ROOT) / env_path
    if not env_file.exists():
        logging.debug("Environment file not found: %s", env_path)
        return

    logging.info("Loading environment from: %s", env_path)
    with open(env_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                # Only set if not already in environment
                if key.strip() not in os.environ:
                    os.environ[key.strip()] = value.strip()


def expand_env_vars(data: dict | list | str) -> dict | list | str:
    """Recursively expand ${VAR} and $VAR references in config."""
    if isinstance(data, dict):
        return {key: expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        def replacer(match):
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        return re.sub(r'\$\{(\w+)\}|\$(\w+)', replacer, data)
    else:
        return data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List datasets and tables or start extract jobs")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional path to a JSON config file overriding defaults",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Verbosity for logging output",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)",
    )
    parser.add_argument("--page-size", type=int, help="Override the configured page size")

    commands = parser.add_subparsers(dest="command", required=True)

    datasets = commands.add_parser("datasets", help="List datasets in the project")
    datasets.add_argument("--filter", default="", help="Label filter, e.g. labels.team:finance")
    datasets.add_argument("--all", action="store_true", help="Include hidden datasets")

    tables = commands.add_parser("tables", help="List tables in a dataset")
    tables.add_argument("dataset", help="Dataset ID")

    extract = commands.add_parser("extract", help="Extract a table to Cloud Storage")
    extract.add_argument("table", help="Source table as DATASET.TABLE")
    extract.add_argument("uris", nargs="+", help="Destination gs:// URIs")
    extract.add_argument("--job-id", default="", help="Job ID (random when omitted)")
    extract.add_argument("--add-suffix", action="store_true", help="Append a random suffix to --job-id")
    extract.add_argument("--format", choices=[f.name for f in DestinationFormat], help="Destination format")
    extract.add_argument("--compression", choices=[c.name for c in Compression], help="Compression")
    extract.add_argument("--field-delimiter", default="", help="CSV field delimiter")
    extract.add_argument("--no-header", action="store_true", help="Do not print a header row")
    return parser.parse_args(argv)


def load_config(path: Path | None) -> ClientConfig:
    if not path:
        return DEFAULT_CONFIG
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    # Load JSON and expand environment variables
    with open(path) as f:
        raw_config = json.load(f)

    expanded_config = expand_env_vars(raw_config)
    return ClientConfig.from_dict(expanded_config)


def run(args: argparse.Namespace) -> None:
    config = load_config(args.config)
    client = Client.from_config(config)
    if args.page_size is not None:
        client.page_size = args.page_size

    if args.command == "datasets":
        count = 0
        for dataset in client.datasets(filter=args.filter, list_hidden=args.all):
            print(dataset.dataset_id)
            count += 1
        logging.info("Listed %d datasets in %s", count, client.project_id)
    elif args.command == "tables":
        count = 0
        for table in client.dataset(args.dataset).tables():
            print(table.table_id)
            count += 1
        logging.info("Listed %d tables in %s", count, args.dataset)
    elif args.command == "extract":
        dataset_id, _, table_id = args.table.partition(".")
        if not table_id:
            raise ValueError(f"Expected DATASET.TABLE, got {args.table!r}")
        dst = GCSReference.from_uris(*args.uris)
        if args.format:
            dst.destination_format = DestinationFormat[args.format]
        if args.compression:
            dst.compression = Compression[args.compression]
        dst.field_delimiter = args.field_delimiter
        extractor = client.dataset(dataset_id).table(table_id).extractor_to(dst)
        extractor.config.job_id = args.job_id
        extractor.config.add_job_id_suffix = args.add_suffix
        extractor.config.disable_header = args.no_header
        job = extractor.run()
        print(job.job_id)


def main() -> None:
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Load environment variables from .env file
    load_env_file(args.env_file)

    run(args)


if __name__ == "__main__":
    main()
