"""Filter compilation settings and the violation policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .exceptions import FilterError

logger = logging.getLogger(__name__)


class FilterPolicy(str, Enum):
    """
    What happens when a request names something outside the allow-list.

    ``REJECT`` raises the violation and aborts the whole compile pass.
    ``IGNORE`` logs it and skips the offending key.  Unknown operators are
    skipped under both policies.
    """

    REJECT = "reject"
    IGNORE = "ignore"

    def violation(self, error: FilterError) -> None:
        """Raise *error* under ``REJECT``; log and swallow it under ``IGNORE``."""
        if self is FilterPolicy.REJECT:
            raise error
        logger.warning("Ignoring filter violation: %s", error)


@dataclass(frozen=True)
class FilterConfig:
    """Settings shared by every compiler of one :class:`DynamicFilter`."""

    policy: FilterPolicy = FilterPolicy.REJECT
    list_delimiter: str = ","

    def __post_init__(self) -> None:
        if not self.list_delimiter:
            raise ValueError("list_delimiter must be a non-empty string")


DEFAULT_CONFIG = FilterConfig()

__all__ = ["DEFAULT_CONFIG", "FilterConfig", "FilterPolicy"]
