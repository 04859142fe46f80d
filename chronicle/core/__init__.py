"""
Chronicle Core Package

Owns the log store: entry formatting, timestamp parsing, file access,
the serialized task queue, filtering and retention.

Architecture Invariants:
- One backing file per LogStore, written only through its queue
- Entries appear in the file in Append submission order
- Write mode is fixed at construction
- The file is the only source of truth (no index)
"""
