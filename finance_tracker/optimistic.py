"""Optimistic session-state updates with rollback.

Pages show a change immediately by writing it into ``st.session_state``
and then call the store. If the store call raises, the previous value is
put back and the error propagates to the page.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, MutableMapping, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def apply_optimistic(
    state: MutableMapping[str, Any],
    key: str,
    new_value: Any,
    remote_call: Callable[[], T],
) -> T:
    """Set ``state[key]`` to ``new_value``, then run ``remote_call``.

    Args:
        state: Session state (or any mutable mapping)
        key: Entry to update
        new_value: Tentative value shown while the call runs
        remote_call: The store mutation

    Returns:
        Whatever ``remote_call`` returns

    Raises:
        Exception: Re-raises the failure after restoring the prior value
            (or removing the key if it did not exist before)
    """
    previous = state.get(key, _MISSING)
    state[key] = new_value
    try:
        return remote_call()
    except Exception:
        if previous is _MISSING:
            state.pop(key, None)
        else:
            state[key] = previous
        logger.warning("Reverted optimistic update of %r after a failed call", key)
        raise
