"""
sta-actions: CI steps for importing content zips and uploading them to AEM.
"""

__version__ = "0.1.0"
