"""sdk - shared runtime helpers for chronicle applications

Contains reusable modules for:
    - logging: Diagnostic logging with structured fields and rotation
"""

__version__ = "1.0-beta"
__versionInfo__ = (1, 0, 0, "beta")
__changelog__ = {
    "1.0-beta": "Diagnostic logging split out of the log store core"
}
