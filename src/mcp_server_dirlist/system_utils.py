import sys
import psutil
import logging

from .session_registry import SessionRegistry

logger = logging.getLogger(__name__)


def log_system_status(registry: SessionRegistry, include_process_stats: bool = True) -> None:
    """Log session registry and process resource stats."""
    try:
        stats = registry.get_stats()
        vm = psutil.virtual_memory()
        process_rss_mb: int | None = None
        open_fds: int | None = None
        if include_process_stats:
            try:
                current_process = psutil.Process()
                process_rss_mb = current_process.memory_info().rss // (1024**2)
                # num_fds() is POSIX only
                if hasattr(current_process, "num_fds"):
                    open_fds = current_process.num_fds()
            except Exception:
                process_rss_mb = None
                open_fds = None

        msg = (
            f"Sessions active={stats.active_sessions} "
            f"completed={stats.completed_sessions} "
            f"oldest_idle={stats.oldest_idle_seconds:.0f}s | "
            f"RAM used={vm.percent:.1f}% "
            f"({vm.used // (1024**2)}MB/{vm.total // (1024**2)}MB)"
            + (
                f" | Process RSS={process_rss_mb}MB"
                if process_rss_mb is not None
                else ""
            )
            + (f" | Open FDs={open_fds}" if open_fds is not None else "")
        )
        logger.info(msg)
        print(f"[DirList-Server] {msg}", file=sys.stderr, flush=True)
    except Exception as exc:  # pragma: no cover
        logger.debug(f"Failed to log system status: {exc}")
