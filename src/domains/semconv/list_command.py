"""Semantic Convention List Command."""

import sys
from argparse import ArgumentParser, Namespace

from domains.semconv.cli_options import add_registry_arguments, config_from_args
from domains.semconv.error import GenerationError
from domains.semconv.semconv_generator_service import SemconvGeneratorService
from domains.semconv.spec_version import resolve_registry
from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager


class ListCommand(BaseCommand):
    """Prints the catalog grouped by namespace."""

    @staticmethod
    def get_name() -> str:
        return "list"

    @staticmethod
    def get_description() -> str:
        return "List the metrics of a semantic convention registry"

    @staticmethod
    def get_help() -> str:
        return """
List the metrics of a registry with the constant names they generate.

Examples:
  python src/main.py semconv list --input registry.yaml
  python src/main.py semconv list --input registry.yaml --namespace http
  python src/main.py semconv list --input registry.yaml --deprecated-only
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        add_registry_arguments(parser)
        parser.add_argument("--namespace", type=str, help="Only show metrics of this root namespace")
        parser.add_argument("--deprecated-only", action="store_true", help="Only show deprecated metrics")

    @staticmethod
    def main(args: Namespace):
        logger = LogManager.get_instance().get_logger("ListCommand")

        try:
            service = SemconvGeneratorService(config_from_args(args))
            with resolve_registry(args.input, spec_version=args.spec_version, latest=args.latest) as (path, _):
                catalog = service.build_catalog(path)
        except GenerationError as e:
            logger.error(f"Listing failed: {e}")
            sys.exit(1)

        shown = 0
        for namespace, entries in catalog.by_namespace().items():
            if args.namespace and namespace != args.namespace:
                continue
            if args.deprecated_only:
                entries = [e for e in entries if e.definition.is_deprecated]
            if not entries:
                continue

            print(f"{namespace} ({len(entries)})")
            for entry in entries:
                definition = entry.definition
                line = (
                    f"  {definition.identifier:<50} {entry.constant_base:<45} "
                    f"{definition.instrument.value:<14} {definition.unit:<16} {definition.stability.value}"
                )
                if definition.is_deprecated:
                    line = f"{line}  -> {definition.deprecated_by}"
                print(line)
                shown += 1

        logger.info(f"{shown} of {len(catalog)} metrics shown")
