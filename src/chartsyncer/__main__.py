# Copyright (c) 2026 - 2026, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run chartsyncer."""

import argparse
import logging
import os
import sys
import tempfile

from rich.console import Console
from rich.table import Table

import chartsyncer
from chartsyncer.chart.context import SyncContext
from chartsyncer.chart.dependency import build_dependencies
from chartsyncer.chart.lock import get_chart_dependencies
from chartsyncer.client import build_source_clients, new_client
from chartsyncer.config.defaults import create_defaults, load_defaults
from chartsyncer.config.global_config import global_config
from chartsyncer.config.sync_config import load_sync_config
from chartsyncer.errors import (
    ChartFileError,
    ConfigurationError,
    DependencyBuildError,
    DigestError,
    SchemaParseError,
)

logger: logging.Logger = logging.getLogger(__name__)


def sync_dependencies(sync_args: argparse.Namespace) -> int:
    """Synchronize the dependencies of an uncompressed chart."""
    if not os.path.isdir(sync_args.chart_path):
        logger.error("The chart path %s is not a directory.", sync_args.chart_path)
        return os.EX_USAGE

    try:
        sync_config = load_sync_config(sync_args.config)
    except ConfigurationError as error:
        logger.error(error)
        return os.EX_CONFIG

    with tempfile.TemporaryDirectory(prefix="chartsyncer_cache_") as cache_dir:
        try:
            context = SyncContext(
                source_repo=sync_config.source_repo,
                target_repo=sync_config.target_repo,
                target_client=new_client(sync_config.target_repo, os.path.join(cache_dir, "target")),
                source_clients=build_source_clients(sync_config.trusted_repos, os.path.join(cache_dir, "source")),
                sync_trusted=sync_config.sync_trusted,
                ignore_trusted=sync_config.ignore_trusted,
            )
        except ConfigurationError as error:
            logger.error(error)
            return os.EX_CONFIG

        try:
            build_dependencies(sync_args.chart_path, context)
        except DependencyBuildError as error:
            for dep_id, cause in error.failures:
                logger.error("Failed to build dependency %s: %s", dep_id, cause)
            return 1
        except (SchemaParseError, ChartFileError, DigestError) as error:
            logger.critical("Cannot synchronize the dependencies of %s: %s", sync_args.chart_path, error)
            return os.EX_DATAERR

    logger.info("Synchronized the dependencies of %s.", sync_args.chart_path)
    return os.EX_OK


def list_dependencies(list_args: argparse.Namespace) -> int:
    """Print the dependencies of a packaged chart."""
    try:
        dependencies = get_chart_dependencies(list_args.archive, list_args.name)
    except (SchemaParseError, ChartFileError) as error:
        logger.error(error)
        return os.EX_DATAERR

    table = Table(title=f"Dependencies of {list_args.name}")
    table.add_column("Name", justify="left")
    table.add_column("Version", justify="left")
    table.add_column("Repository", justify="left")
    for dependency in dependencies:
        table.add_row(dependency.name, dependency.version, dependency.repository)
    Console().print(table)
    return os.EX_OK


def perform_action(action_args: argparse.Namespace) -> None:
    """Perform the indicated action of chartsyncer."""
    match action_args.action:
        case "dump-defaults":
            if not create_defaults(global_config.output_path, os.getcwd()):
                sys.exit(os.EX_CANTCREAT)
            sys.exit(os.EX_OK)

        case "sync-deps":
            sys.exit(sync_dependencies(action_args))

        case "list-deps":
            sys.exit(list_dependencies(action_args))

        case _:
            logger.error("chartsyncer does not support command option %s.", action_args.action)
            sys.exit(os.EX_USAGE)


def main(argv: list[str] | None = None) -> None:
    """Execute chartsyncer as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
    """
    main_parser = argparse.ArgumentParser(prog="chartsyncer")

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {chartsyncer.__version__}",
        help="Show chartsyncer's version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run chartsyncer with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "-o",
        "--output-dir",
        default=os.path.join(os.getcwd(), "output"),
        help="The output destination path for chartsyncer",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    sub_parser = main_parser.add_subparsers(dest="action", help="Run chartsyncer <action> --help for help")

    sync_parser = sub_parser.add_parser(
        name="sync-deps",
        description="Point the dependencies of an uncompressed chart at the target repository and rebuild them.",
    )
    sync_parser.add_argument("-c", "--config", required=True, type=str, help="Path to the sync configuration file.")
    sync_parser.add_argument("-p", "--chart-path", required=True, type=str, help="Path to the uncompressed chart.")

    list_parser = sub_parser.add_parser(name="list-deps", description="List the dependencies of a packaged chart.")
    list_parser.add_argument("-a", "--archive", required=True, type=str, help="Path to the chart archive.")
    list_parser.add_argument("-n", "--name", required=True, type=str, help="The name of the chart.")

    sub_parser.add_parser(name="dump-defaults", description="Dumps the defaults.ini file to the output directory.")

    args = main_parser.parse_args(argv)

    if not args.action:
        main_parser.print_help()
        sys.exit(os.EX_USAGE)

    if args.verbose:
        log_level = logging.DEBUG
        log_format = "%(asctime)s [%(name)s:%(funcName)s:%(lineno)d] [%(levelname)s] %(message)s"
    else:
        log_level = logging.INFO
        log_format = "%(asctime)s [%(levelname)s] %(message)s"

    st_handler = logging.StreamHandler(sys.stdout)
    logging.basicConfig(format=log_format, handlers=[st_handler], force=True, level=log_level)

    if os.path.isfile(args.output_dir):
        logger.error("The output path %s is a file. Exiting ...", args.output_dir)
        sys.exit(os.EX_USAGE)
    os.makedirs(args.output_dir, exist_ok=True)

    log_file_handler = logging.FileHandler(os.path.join(args.output_dir, "debug.log"), "w")
    log_file_handler.setFormatter(logging.Formatter(log_format))
    logging.getLogger().addHandler(log_file_handler)

    global_config.load(output_path=args.output_dir)

    if not load_defaults(args.defaults_path):
        logger.error("Exiting because the defaults configuration could not be loaded.")
        sys.exit(os.EX_NOINPUT)

    perform_action(args)


if __name__ == "__main__":
    main()
