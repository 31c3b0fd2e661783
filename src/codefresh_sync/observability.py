from __future__ import annotations

import logging
from typing import Any

from .logging import RESOURCE_FIELDS


def log_event(
    event: str,
    logger: logging.Logger,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Emit a ``resource.<kind>.<op>`` record.
    - Only the resource fields the formatter prints are accepted
    - ``None`` values are left off the record
    """
    unknown = sorted(set(fields) - set(RESOURCE_FIELDS))
    if unknown:
        raise TypeError(f"unsupported log fields: {', '.join(unknown)}")
    extra = {k: v for k, v in fields.items() if v is not None}
    logger.log(level, event, extra=extra)


__all__ = ["log_event"]
