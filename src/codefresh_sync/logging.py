import logging
from typing import IO, Any, Optional

PACKAGE_LOGGER = "codefresh_sync"

# Set by CodefreshClient.execute on every round trip.
REQUEST_FIELDS = ("method", "path", "status", "duration_ms")
# Set by the reconcilers through observability.log_event.
RESOURCE_FIELDS = ("resource", "resource_id", "replaced", "error")

LOG_EXTRA_FIELDS = REQUEST_FIELDS + RESOURCE_FIELDS


class LogfmtFormatter(logging.Formatter):
    """
    One logfmt line per record: level, logger, event, then whichever
    request or resource fields the record carries, in a fixed order.
    """

    def format(self, record: logging.LogRecord) -> str:
        kv = [
            f"level={record.levelname.lower()}",
            f"logger={record.name}",
        ]

        msg = record.getMessage()
        if msg:
            kv.append(f"event={self._fmt_val(msg)}")

        kv.extend(
            f"{key}={self._fmt_val(getattr(record, key))}"
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )

        if record.exc_info and record.exc_info[0] is not None:
            kv.append(f"exc_type={record.exc_info[0].__name__}")

        return " ".join(kv)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, bool):
            return "true" if val else "false"
        if isinstance(val, (int, float)):
            return str(val)
        s = str(val)
        # HTTP error bodies end up in ``error``; keep them on one line.
        if not s or any(c in s for c in ' ="\n\r\t'):
            s = s.replace("\\", "\\\\").replace('"', '\\"')
            s = s.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")
            return f'"{s}"'
        return s


def setup_logging(level: str = "INFO", *, stream: Optional[IO[str]] = None) -> logging.Handler:
    """
    Send ``codefresh_sync.*`` records to ``stream`` (stderr by default) as logfmt.
    Calling it again replaces the handler installed by the previous call.
    """
    log = logging.getLogger(PACKAGE_LOGGER)
    for h in list(log.handlers):
        if isinstance(h.formatter, LogfmtFormatter):
            log.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LogfmtFormatter())
    log.addHandler(handler)
    log.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


__all__ = [
    "setup_logging",
    "LogfmtFormatter",
    "LOG_EXTRA_FIELDS",
    "REQUEST_FIELDS",
    "RESOURCE_FIELDS",
]
