import os

from log_config import LogManager
from utils.command.command_manager import CommandManager
from utils.error.error_manager import handle_generic_exception
from utils.logging.logging_manager import LogLevel

logger = LogManager.get_instance().get_logger("CLI")


def main():
    """Entry point for the CLI application. Loads commands dynamically and executes
    the requested command.
    """
    command_manager = CommandManager(os.path.join(os.path.dirname(__file__), "domains"))
    command_manager.load_commands()
    parser = command_manager.build_parser()
    parser.add_argument("--verbose", action="store_true", help="Log at DEBUG level")

    args = parser.parse_args()

    if args.verbose:
        LogManager.get_instance().set_level(LogLevel.DEBUG)

    # No command given, or only a group name: show help for what was typed
    if not hasattr(args, "func") or args.func is None:
        parser.print_help()
        return

    try:
        args.func(args)
    except Exception as e:
        handle_generic_exception(e, "An error occurred during execution.")


if __name__ == "__main__":
    main()
