import logging
from typing import Iterator, List, Optional


class LogSink:
    """Collects human-readable diagnostic lines for one component.

    Entries are kept in order until cleared and are mirrored to a standard
    logger at DEBUG level. Nothing in the engine reads them back to make a
    decision.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, max_entries: Optional[int] = None):
        self.entries: List[str] = []
        self.logger = logger
        self.max_entries = max_entries

    def record(self, message: str):
        """Append a message"""
        self.entries.append(message)
        if self.logger is not None:
            self.logger.debug(message)

        # Keep history within limit
        if self.max_entries is not None and len(self.entries) > self.max_entries:
            self.entries.pop(0)

    def to_list(self) -> List[str]:
        return list(self.entries)

    def clear(self):
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.entries))
