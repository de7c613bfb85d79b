"""
AEM Layer.

This package handles the access-token exchange and the upload of xwalk
packages through the aem-import-helper CLI.
"""

from .auth import AccessTokenFetcher, fetch_access_token
from .command import Command, CommandBuilder, Secret
from .uploader import XwalkUploader, build_upload_command, run_command

__all__ = [
    "AccessTokenFetcher",
    "Command",
    "CommandBuilder",
    "Secret",
    "XwalkUploader",
    "build_upload_command",
    "fetch_access_token",
    "run_command",
]
