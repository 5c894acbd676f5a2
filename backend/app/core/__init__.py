"""Core — error taxonomy and pure security helpers.

Invariants:
    - No I/O, no framework imports
"""
