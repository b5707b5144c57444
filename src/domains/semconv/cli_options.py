"""Arguments shared by the semconv commands."""

from argparse import ArgumentParser, Namespace

from domains.semconv.config import SUPPORTED_TARGETS, GeneratorConfig, load_config


def add_registry_arguments(parser: ArgumentParser):
    parser.add_argument(
        "--input",
        required=True,
        help="Registry file (.yaml/.yml/.json), directory of registry files, or http(s) URL",
    )
    version = parser.add_mutually_exclusive_group()
    version.add_argument(
        "--spec-version",
        type=str,
        help="Release tag to generate from (checked out with git worktree when the input is under git)",
    )
    version.add_argument(
        "--latest",
        action="store_true",
        help="Generate from the highest release tag of the registry's git repository",
    )
    parser.add_argument("--config", type=str, help="Generator configuration YAML file")


def add_output_arguments(parser: ArgumentParser):
    parser.add_argument("--target", choices=SUPPORTED_TARGETS, help="Output language (default: go)")
    parser.add_argument(
        "--output",
        type=str,
        help="Exact output folder (default: <output_dir>/<spec version>)",
    )
    parser.add_argument("--filename", type=str, help="Output file name (default: metric.<ext>)")
    parser.add_argument("--package", type=str, help="Package name written into the generated file")
    parser.add_argument("--template", type=str, help="Custom Jinja2 template for the go or python target")
    parser.add_argument(
        "--split-by-namespace",
        action="store_true",
        default=None,
        help="Write one file per root namespace as <namespace>conv/<filename>",
    )


def config_from_args(args: Namespace) -> GeneratorConfig:
    """Configuration file and environment, overridden by command line flags, validated.

    Raises:
        ConfigurationError: If the resulting configuration is invalid.
    """
    config = load_config(getattr(args, "config", None)).with_overrides(
        target=getattr(args, "target", None),
        filename=getattr(args, "filename", None),
        package_name=getattr(args, "package", None),
        template=getattr(args, "template", None),
        split_by_namespace=getattr(args, "split_by_namespace", None),
    )
    config.validate()
    return config
