"""Correlation-aware logging for LRG report processing.

Records emitted while a report is read, built or written carry the component
that produced them and the correlation ID of the request, so one file's
processing can be followed through the tokenizer, builder and writer.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple


class CorrelationLogger(logging.LoggerAdapter):
    """Logger adapter that merges bound context into every record's ``extra``.

    Per-call ``extra`` values are added to (and may override) the bound
    context instead of replacing it.
    """

    def __init__(
        self,
        logger: logging.Logger,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        **context: Any
    ) -> None:
        bound: Dict[str, Any] = {
            "component": component or logger.name.split(".")[-1],
            "correlation_id": correlation_id,
        }
        bound.update(context)
        super().__init__(logger, bound)

    @property
    def component(self) -> str:
        return self.extra["component"]

    @property
    def correlation_id(self) -> Optional[str]:
        return self.extra["correlation_id"]

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "CorrelationLogger":
        """Return a logger whose records also carry ``context``."""
        merged = {
            key: value
            for key, value in self.extra.items()
            if key not in ("component", "correlation_id")
        }
        merged.update(context)
        return CorrelationLogger(
            self.logger, self.correlation_id, self.component, **merged
        )

    def is_debug_enabled(self) -> bool:
        """Check whether debug records would be emitted."""
        return self.isEnabledFor(logging.DEBUG)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name; defaults to the last part of ``name``

    Returns:
        CorrelationLogger wrapping ``logging.getLogger(name)``
    """
    return CorrelationLogger(logging.getLogger(name), correlation_id, component)
