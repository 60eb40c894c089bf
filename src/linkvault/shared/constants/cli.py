"""
CLI Constants

Command names, help texts and defaults for the LinkVault command line.
"""

from .system import Application


class CLICommands:
    """Command names."""

    REFRESH = "refresh"
    CLEAR = "clear"
    STATUS = "status"
    SHOW = "show"


class CLIDefaults:
    """Default values and exit codes."""

    VERSION = Application.VERSION
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_INTERRUPTED = 130
    JSON_INDENT = 2


class CLIHelp:
    """Help texts."""

    APP_NAME = "linkvault"
    APP_DESCRIPTION = "Fetch, resolve and cache linked Airtable records."
    APP_STYLE = "rich"
    VERSION_TEXT = "LinkVault v{version}"

    REFRESH_HELP = "Rebuild the whole cache from the remote base."
    CLEAR_HELP = "Invalidate the in-memory and persisted cache."
    STATUS_HELP = "Show cached tables and record counts."
    SHOW_HELP = "Print a cached table (or a nested value) as JSON."
    SHOW_TABLE_HELP = "Name of the cached table"
    SHOW_PATH_HELP = "Path inside the table, e.g. '0.fields.lessons[1].id'"
    CONFIG_HELP = "Path to a TOML configuration file"


class CLIMessages:
    """User facing messages."""

    REFRESH_STARTED = "Refreshing cache from base..."
    REFRESH_COMPLETED = "Cache refreshed: {count} {table} records resolved"
    CACHE_CLEARED = "Cache cleared"
    CACHE_EMPTY = "Cache is empty. Run 'linkvault refresh' first."
    TABLE_NOT_CACHED = "Table '{table}' is not cached"
