"""
Query/filter engine.

Turns raw file text into entries and selects the ones a caller asked for.

Query Flow:
  1. Split raw text on newlines, drop empty lines, keep file order
  2. No filter given -> every entry
  3. Otherwise keep an entry if it contains the content substring OR the
     date substring (either match is enough)

Date filters are validated by the caller before a query task is queued, see
LogStore.getLogs().
"""

from typing import List, Optional


def splitEntries(rawText: str) -> List[str]:
    """Split file text into non-empty entry lines, preserving order."""
    return [line for line in rawText.split("\n") if line]


def filterEntries(rawText: str, content: Optional[str] = None, date: Optional[str] = None) -> List[str]:
    """
    Return the entries of rawText matching content OR date.

    Empty strings count as "no filter".

    Args:
        rawText: Full backing file text
        content: Substring an entry may contain
        date: Date substring (already validated) an entry may contain

    Returns:
        Matching entries in file order
    """
    entries = splitEntries(rawText)
    if not content and not date:
        return entries

    return [
        entry for entry in entries
        if (content and content in entry) or (date and date in entry)
    ]
