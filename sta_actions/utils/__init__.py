"""
Shared helpers: input loading, mountpoint parsing, formatting and structured logging.
"""
