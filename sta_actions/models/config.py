"""
Pydantic models for the inputs of each action.
Provides validation for all settings before any work starts.
"""

from pydantic import BaseModel, Field, field_validator

MOUNTPOINT_TYPES = ("sharepoint", "crosswalk")
DEFAULT_XWALK_ZIP_NAME = "xwalk-index.zip"


class _ActionConfig(BaseModel):
    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True


class ImportZipConfig(_ActionConfig):
    """Settings for downloading and extracting the import zip."""

    download_url: str

    # Fixed by the upstream import service, overridable for testing.
    download_url_marker: str = "spacecat"
    temp_dir_prefix: str = "sta-"
    zip_name: str = "import.zip"
    contents_dir_name: str = "contents"

    @field_validator("zip_name", "contents_dir_name")
    @classmethod
    def validate_plain_name(cls, v: str) -> str:
        """Workspace names must stay inside the workspace root."""
        if not v or "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"'{v}' is not a plain file or directory name.")
        return v


class MountpointConfig(_ActionConfig):
    """Settings for classifying a mountpoint URL."""

    mountpoint: str
    mountpoint_type: str = ""


class AemHelperConfig(_ActionConfig):
    """Settings for the AEM helper operations."""

    operation: str
    credentials_path: str = ""


class XwalkUploadConfig(_ActionConfig):
    """Settings for uploading an xwalk content package to an AEM author."""

    access_token: str = Field(..., repr=False)
    aem_author_url: str
    zip_path: str
    zip_name: str = ""
    skip_assets: bool = False

    @field_validator("skip_assets", mode="before")
    @classmethod
    def parse_skip_assets(cls, v: object) -> bool:
        """Only the literal input 'true' enables skipping assets."""
        if isinstance(v, str):
            return v == "true"
        return bool(v)

    @property
    def resolved_zip_name(self) -> str:
        return self.zip_name or DEFAULT_XWALK_ZIP_NAME
