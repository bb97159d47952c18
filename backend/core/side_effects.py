"""
Primary effect + best-effort side effect.

Some writes follow an operation that has already happened (distribution
audit rows, quote-template snapshots). Their failure must not undo or fail
the primary operation, but it must not vanish either: it is logged with
context and handed back to the caller as a warning string.
"""
import logging
import sqlite3
from typing import Any, Callable, Dict, Optional

from marketplace.quote_match import PartialPersistenceWarning

logger = logging.getLogger(__name__)


def run_best_effort(
    effect: str,
    func: Callable[..., Any],
    *args: Any,
    context: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Optional[str]:
    """
    Run a secondary write, downgrading store failures to a warning.

    Args:
        effect: Short name of the write, e.g. "distribution_records"
        func: The write to run
        context: Identifiers attached to the log record (project_id, vendor_id)

    Returns:
        None on success, or the warning message on failure
    """
    try:
        func(*args, **kwargs)
        return None
    except sqlite3.Error as e:
        warning = PartialPersistenceWarning(effect, e)
        logger.warning(
            f"Best-effort write '{effect}' failed: {e}",
            extra={"effect": effect, "error": str(e), **(context or {})},
        )
        return str(warning)
