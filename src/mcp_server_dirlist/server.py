import logging
import sys

# FastMCP 2.0 import
from fastmcp import FastMCP

from .config import ListingSettings, load_settings
from .iteration_controller import IterationController
from .result_schema import records_to_frame
from .session_registry import SessionRegistry, default_registry
from .system_utils import log_system_status
from .utils.format_utils import format_record, summarize_listing
from .utils.session_utils import validate_session_token

settings = load_settings()

logger = logging.getLogger(__name__)


def configure_logging(target: logging.Logger, level: str) -> None:
    """Attach a stderr handler when none is configured; stdout carries the MCP protocol."""
    if not target.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
        target.addHandler(handler)
    target.setLevel(level)


configure_logging(logger, settings.log_level)
logger.info("Starting FastMCP 2.0 directory listing server")

# Create FastMCP instance
mcp = FastMCP("Directory Lister 📂")

END_OF_DATA = "END"


class DirectoryLister:
    def __init__(
        self,
        registry: SessionRegistry | None = None,
        settings: ListingSettings | None = None,
    ):
        self.settings = settings or load_settings()
        self.registry = registry if registry is not None else default_registry()
        self.controller = IterationController(self.registry, tz=self.settings.tz)
        logger.debug(
            f"DirectoryLister initialized (tz={self.settings.timezone_name}, "
            f"idle={self.settings.session_idle_seconds}s)"
        )

    def log_system_status(self) -> None:
        """Delegate to system utils for logging."""
        log_system_status(self.registry)

    def open_listing(self, directory_path: str, row_limit: int | None = None) -> str:
        """Reap idle sessions, then open a new one and return its token."""
        reaped = self.registry.reap_idle(self.settings.session_idle_seconds)
        if reaped:
            logger.info(f"Reaped {len(reaped)} idle sessions")
        if row_limit is None:
            row_limit = self.settings.default_row_limit
        return self.controller.open_session(directory_path, row_limit)

    def fetch_entry(self, session_token: str) -> str:
        session_token = validate_session_token(session_token)
        record = self.controller.fetch(session_token)
        if record is None:
            return END_OF_DATA
        return format_record(record)

    def close_listing(self, session_token: str) -> str:
        session_token = validate_session_token(session_token)
        self.registry.close(session_token)
        return f"Closed listing session '{session_token}'"

    def list_directory(self, directory_path: str, row_limit: int | None = None) -> str:
        if row_limit is None:
            row_limit = self.settings.default_row_limit
        frame = records_to_frame(self.controller.iterate(directory_path, row_limit))
        return summarize_listing(directory_path, frame, row_limit)

    def describe_sessions(self) -> str:
        stats = self.registry.get_stats()
        return (
            f"Active sessions: {stats.active_sessions}\n"
            f"Recently completed: {stats.completed_sessions}\n"
            f"Oldest idle: {stats.oldest_idle_seconds:.0f}s"
        )


# Global lister instance
directory_lister = DirectoryLister(settings=settings)


# === TOOLS ===
@mcp.tool
def open_listing(directory_path: str, row_limit: int | None = None) -> str:
    """Start listing a directory one entry at a time.

    Args:
        directory_path: Directory to list
        row_limit: Maximum number of entries to return (defaults to DIRLIST_DEFAULT_ROW_LIMIT)

    Returns:
        Session token to pass to fetch_entry
    """
    directory_lister.log_system_status()
    return directory_lister.open_listing(directory_path, row_limit)


@mcp.tool
def fetch_entry(session_token: str) -> str:
    """Fetch the next entry of a listing session.

    Args:
        session_token: Token returned by open_listing

    Returns:
        Tab-separated attributes, size, modified, type and name, or END when done
    """
    return directory_lister.fetch_entry(session_token)


@mcp.tool
def close_listing(session_token: str) -> str:
    """Abandon a listing session before it reaches the end.

    Args:
        session_token: Token returned by open_listing
    """
    return directory_lister.close_listing(session_token)


@mcp.tool
def list_directory(directory_path: str, row_limit: int | None = None) -> str:
    """List a whole directory as a table.

    Args:
        directory_path: Directory to list
        row_limit: Maximum number of entries to return

    Returns:
        Table of attributes, size, modified, type and name
    """
    directory_lister.log_system_status()
    return directory_lister.list_directory(directory_path, row_limit)


# === RESOURCES ===
@mcp.resource("dirlist://sessions")
def get_sessions() -> str:
    """Statistics about live listing sessions."""
    return directory_lister.describe_sessions()


# === MAIN ENTRY POINT ===
def main():
    """Main entry point for the FastMCP 2.0 server."""
    mcp.run()


if __name__ == "__main__":
    main()
