"""Semantic Convention Generate Command."""

import sys
from argparse import ArgumentParser, Namespace

from domains.semconv.cli_options import add_output_arguments, add_registry_arguments, config_from_args
from domains.semconv.error import GenerationError
from domains.semconv.semconv_generator_service import SemconvGeneratorService
from utils.command.base_command import BaseCommand
from utils.logging.logging_manager import LogManager
from utils.output_manager import OutputManager


class GenerateCommand(BaseCommand):
    """Generates metric Name/Unit/Description constants from a registry."""

    @staticmethod
    def get_name() -> str:
        return "generate"

    @staticmethod
    def get_description() -> str:
        return "Generate metric constants from a semantic convention registry"

    @staticmethod
    def get_help() -> str:
        return """
Generate metric Name/Unit/Description constants from a semantic convention registry.

The registry is loaded, validated and rendered completely in memory before
anything is written; any malformed entry, duplicate identifier or naming
collision aborts the run with no output.

Examples:
  # Go constants from a local registry checkout
  python src/main.py semconv generate --input ../semantic-conventions/model

  # Latest release tag of the registry repository
  python src/main.py semconv generate --input ../semantic-conventions/model --latest

  # Python module, one file per namespace, with a summary report
  python src/main.py semconv generate --input registry.yaml --target python \\
      --split-by-namespace --summary-output output/semconv-summary.json
        """

    @staticmethod
    def get_arguments(parser: ArgumentParser):
        add_registry_arguments(parser)
        add_output_arguments(parser)
        parser.add_argument(
            "--summary-output",
            type=str,
            help="Write a JSON summary (counts per namespace, instrument, stability) to this path",
        )

    @staticmethod
    def main(args: Namespace):
        logger = LogManager.get_instance().get_logger("GenerateCommand")

        try:
            config = config_from_args(args)
            service = SemconvGeneratorService(config)
            result = service.generate(
                args.input,
                spec_version=args.spec_version,
                latest=args.latest,
                output_dir=args.output,
            )

            logger.info(
                f"Catalog {result.catalog.digest()}: {len(result.catalog)} metrics, "
                f"{len(result.catalog.deprecated())} deprecated"
            )
            for path in result.written:
                print(path)

            if args.summary_output:
                summary = service.summarize(result)
                path = OutputManager.save_summary_report(
                    summary, "semconv-summary", "summary", output_path=args.summary_output
                )
                logger.info(f"Summary saved to {path}")

        except GenerationError as e:
            logger.error(f"Generation failed: {e}")
            sys.exit(1)
