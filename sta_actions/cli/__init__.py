"""
Command-Line Layer.

Typer commands, Rich formatting, and GitHub Actions output reporting.
"""
