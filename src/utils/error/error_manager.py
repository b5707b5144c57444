from log_config import log_manager

logger = log_manager.get_logger("ErrorManager")


def handle_generic_exception(exception: Exception, context_message: str, metadata: dict | None = None):
    """Logs an unexpected exception with its traceback and re-raises it with context.

    :param exception: The exception raised.
    :param context_message: Custom message providing context for the error.
    :param metadata: Additional metadata (optional) for debugging purposes.
    :raises RuntimeError: Always, chained to the original exception.
    """
    metadata_info = f" | Metadata: {metadata}" if metadata else ""
    logger.error(
        f"An error occurred: {context_message}{metadata_info} - {exception}",
        exc_info=True,
    )
    raise RuntimeError(f"{context_message}{metadata_info}") from exception
