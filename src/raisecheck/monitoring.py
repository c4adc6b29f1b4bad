import os
from typing import Any

import dotenv
import logfire


def enable_monitoring(
    logfire_enabled: bool | Any = None,
    instrument_pydantic: bool = False,
    **options,
) -> bool:
    """
    Configure logfire when monitoring is enabled.

    ``logfire_enabled`` falls back to the ``LOGFIRE_ENABLED`` environment variable,
    which may come from a ``.env`` file. Remaining keyword arguments are passed to
    ``logfire.configure``.

    Returns:
        Whether logfire was configured
    """
    dotenv.load_dotenv()
    logfire_enabled = logfire_enabled or os.getenv("LOGFIRE_ENABLED")
    available = (
        logfire_enabled
        and isinstance(logfire_enabled, bool)
        or str(logfire_enabled).lower() in ("1", "true")
    )

    if not available:
        return False

    console = options.pop(
        "console",
        logfire.ConsoleOptions(show_project_link=False),
    )

    if "token" not in options and (token := os.getenv("LOGFIRE_TOKEN")):
        options["token"] = token

    logfire.configure(**options, console=console)

    if instrument_pydantic:
        logfire.instrument_pydantic()
    return True
