from abc import ABC, abstractmethod
from argparse import ArgumentParser, Namespace


class BaseCommand(ABC):
    """Abstract base class for all CLI commands.

    Commands are discovered by ``CommandManager``; the package path of the
    defining module (below ``domains``) becomes the command's parent groups,
    so ``domains/semconv/generate_command.py`` is invoked as
    ``semconv generate``.
    """

    @staticmethod
    @abstractmethod
    def get_name() -> str:
        """Returns the name the command is invoked by."""
        pass

    @staticmethod
    def get_description() -> str:
        return "No description provided."

    @staticmethod
    def get_help() -> str:
        return "No help available."

    @classmethod
    def register_command(cls, parent_parser):
        """Registers the command in the given subparsers action.

        Args:
            parent_parser (_SubParsersAction): The subparsers to add the command to.
        """
        parser = parent_parser.add_parser(
            cls.get_name(),
            description=cls.get_description(),
            help=cls.get_help(),
        )
        cls.get_arguments(parser)
        parser.set_defaults(func=cls.main)

    @staticmethod
    @abstractmethod
    def get_arguments(parser: ArgumentParser):
        """Adds the command's arguments to its parser."""
        pass

    @staticmethod
    @abstractmethod
    def main(args: Namespace):
        """Executes the command.

        Args:
            args (Namespace): Parsed arguments from the CLI.
        """
        pass
