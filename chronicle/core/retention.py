"""
Retention compactor.

Keeps the entries whose embedded timestamp lies within the retention window
and renders the text the backing file is rewritten with.

Rules:
- age = now - entry timestamp, in local epoch seconds (DST-safe)
- age <= retentionSeconds: kept (the boundary itself is kept)
- age > retentionSeconds: dropped
- no parseable timestamp (raw entries, impossible dates): dropped
- kept entries keep their order and blank-line layout, so compacting an
  already compacted file yields the same text
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from .query import splitEntries
from .timestamps import TimestampParser


@dataclass
class CompactionResult:
    """Outcome of one compaction pass"""
    kept: List[str] = field(default_factory=list)
    expired: int = 0
    unparseable: int = 0

    @property
    def dropped(self) -> int:
        return self.expired + self.unparseable

    def render(self) -> str:
        """File text for the kept entries ("" when nothing is kept)."""
        return "".join(f"\n{entry}\n" for entry in self.kept)


def compactEntries(rawText: str, retentionSeconds: float, parser: TimestampParser,
                   now: datetime) -> CompactionResult:
    """
    Select the entries of rawText still inside the retention window.

    Args:
        rawText: Full backing file text
        retentionSeconds: Maximum entry age in seconds
        parser: Parser configured with the store's delimiters
        now: Reference instant (naive local time, like entry timestamps)

    Returns:
        CompactionResult; call render() for the rewritten file text
    """
    nowSeconds = now.timestamp()
    result = CompactionResult()

    for entry in splitEntries(rawText):
        timestamp = parser.extract(entry)
        if timestamp is None:
            result.unparseable += 1
            continue
        if nowSeconds - timestamp.timestamp() > retentionSeconds:
            result.expired += 1
            continue
        result.kept.append(entry)

    return result
