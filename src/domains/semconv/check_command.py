"""Semantic Convention Check Command."""

import sys
from argparse import ArgumentParser, Namespace

from domains.semconv.cli_options import add_output_arguments, add_registry_arguments, config_from_args
from domains.semconv.error import GenerationError
from domains.semconv.semconv_generator_service import SemconvGeneratorService
from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager


class CheckCommand(BaseCommand):
    """Fails when generated constants are out of date with the registry."""

    @staticmethod
    def get_name() -> str:
        return "check"

    @staticmethod
    def get_description() -> str:
        return "Check that generated metric constants match the registry"

    @staticmethod
    def get_help() -> str:
        return """
Render the catalog and compare it with the files in the output folder.

Prints a unified diff for every missing, outdated or stale file and exits with
status 1 when there is any drift, so it can gate CI.

Examples:
  python src/main.py semconv check --input ../semantic-conventions/model --spec-version v1.28.0
  python src/main.py semconv check --input registry.yaml --output internal/semconv --quiet
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        add_registry_arguments(parser)
        add_output_arguments(parser)
        parser.add_argument("--quiet", action="store_true", help="Only list drifted files, without diffs")

    @staticmethod
    def main(args: Namespace):
        logger = LogManager.get_instance().get_logger("CheckCommand")

        try:
            config = config_from_args(args)
            result = SemconvGeneratorService(config).check(
                args.input,
                spec_version=args.spec_version,
                latest=args.latest,
                output_dir=args.output,
            )
        except GenerationError as e:
            logger.error(f"Check failed: {e}")
            sys.exit(1)

        if not result.drifts:
            logger.info(f"{len(result.files)} file(s) under {result.output_dir} are up to date")
            return

        for drift in result.drifts:
            state = "stale" if drift.stale else "missing" if drift.missing else "outdated"
            logger.warning(f"{drift.path} is {state}")
            if not args.quiet:
                sys.stdout.write(drift.diff)
        logger.error(f"{len(result.drifts)} of {len(result.files)} file(s) differ from the registry")
        sys.exit(1)
