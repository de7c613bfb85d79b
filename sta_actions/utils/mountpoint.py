"""
Utilities for classifying mountpoint URLs and extracting the parts an
upload needs from them.
"""

import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from sta_actions.exceptions import (
    ConfigurationError,
    MountpointFormatError,
    UnsupportedMountpointError,
)
from sta_actions.models.config import MOUNTPOINT_TYPES

log = logging.getLogger(__name__)


class MountpointType(str, Enum):
    SHAREPOINT = "sharepoint"
    CROSSWALK = "crosswalk"


_SUPPORTED = [
    (re.compile(r"sharepoint", re.IGNORECASE), MountpointType.SHAREPOINT),
    (re.compile(r"adobeaemcloud", re.IGNORECASE), MountpointType.CROSSWALK),
]
_REJECTED = [
    (re.compile(r"drive\.google\.com", re.IGNORECASE), "Google is not supported for upload yet."),
    (re.compile(r"dropbox", re.IGNORECASE), "Dropbox is not supported for upload."),
    (re.compile(r"github\.com", re.IGNORECASE), "GitHub is not supported for upload."),
]


@dataclass(frozen=True)
class MountpointData:
    host: str
    path: str
    site: str | None = None

    def to_dict(self) -> dict[str, str]:
        data = {"host": self.host}
        if self.site is not None:
            data["site"] = self.site
        data["path"] = self.path
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))


@dataclass(frozen=True)
class MountpointResult:
    mountpoint: str
    type: MountpointType
    data: MountpointData


def classify_mountpoint(mountpoint: str) -> MountpointType:
    """
    Determines the backing store of a mountpoint URL.

    Raises:
        UnsupportedMountpointError: For known unsupported stores and anything
        not recognised.
    """
    for pattern, mountpoint_type in _SUPPORTED:
        if pattern.search(mountpoint):
            return mountpoint_type
    for pattern, message in _REJECTED:
        if pattern.search(mountpoint):
            raise UnsupportedMountpointError(message)
    raise UnsupportedMountpointError(
        f"This mountpoint is not supported for upload: {mountpoint}"
    )


def _host(mountpoint: str) -> str:
    try:
        parsed = urlsplit(mountpoint)
        port = parsed.port
    except ValueError as e:
        raise MountpointFormatError(f"Mountpoint is not a valid URL: {mountpoint}") from e
    if not parsed.scheme or not parsed.netloc:
        raise MountpointFormatError(f"Mountpoint is not a valid URL: {mountpoint}")
    host = parsed.hostname or ""
    if port is not None:
        host = f"{host}:{port}"
    return host


def parse_mountpoint_data(mountpoint: str, mountpoint_type: MountpointType) -> MountpointData:
    """
    Extracts host, and for SharePoint the site, plus the content path.

    Raises:
        MountpointFormatError: If a SharePoint URL lacks a `/sites/<name>/<path>` part.
    """
    host = _host(mountpoint)
    pathname = urlsplit(mountpoint).path or "/"

    if mountpoint_type is MountpointType.SHAREPOINT:
        sites_parts = pathname.split("/sites/")
        if len(sites_parts) < 2:
            raise MountpointFormatError("Mountpoint is not in the expected format.")
        site, *path_parts = sites_parts[1].split("/")
        path = "/".join(path_parts)
        if len(sites_parts) == 3:
            path = f"{path}/sites/{sites_parts[2]}"
        if not host or not site or not path:
            raise MountpointFormatError("Mountpoint is not in the expected format.")
        return MountpointData(host=host, site=site, path=path)

    return MountpointData(host=host, path=pathname[1:])


def resolve_mountpoint(mountpoint: str, desired_type: str) -> MountpointResult:
    """
    Classifies a mountpoint, checks it against the requested type and parses it.

    Raises:
        ConfigurationError: If the requested type is not a supported one.
        UnsupportedMountpointError: If the store is unsupported or of a
        different type than requested.
        MountpointFormatError: If required URL parts are missing.
    """
    if desired_type not in MOUNTPOINT_TYPES:
        raise ConfigurationError(f"Invalid requested mountpoint type: {desired_type}")

    log.info(f"✅ Mountpoint provided: {mountpoint}")
    mountpoint_type = classify_mountpoint(mountpoint)
    if mountpoint_type.value != desired_type:
        raise UnsupportedMountpointError(
            f"Requested mountpoint type {desired_type} does not match found "
            f"mountpoint type found: {mountpoint_type.value}"
        )
    log.info(f"✅ Type: {mountpoint_type.value}")

    data = parse_mountpoint_data(mountpoint, mountpoint_type)
    log.info(f"✅ Mountpoint Data: {json.dumps(data.to_dict(), indent=2)}")
    return MountpointResult(mountpoint=mountpoint, type=mountpoint_type, data=data)
