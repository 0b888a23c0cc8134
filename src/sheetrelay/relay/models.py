"""Data models for relayed uploads."""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_script_url(value: Any) -> Optional[str]:
    """Coerce a destination override to trimmed text, or None when blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class UploadRequest(BaseModel):
    """Inbound upload body. Unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    sheet_name: Optional[str] = Field(default=None, alias="sheetName")
    values: list[Any]
    google_script_url: Optional[str] = Field(default=None, alias="googleScriptUrl")

    @field_validator("google_script_url", mode="before")
    @classmethod
    def _trim_script_url(cls, v: Any) -> Optional[str]:
        return normalize_script_url(v)

    def forward_payload(self, default_sheet_name: str) -> dict:
        """Build the body sent downstream: sheet name and rows only."""
        return {
            "sheetName": self.sheet_name or default_sheet_name,
            "values": self.values,
        }


@dataclass
class ForwardOutcome:
    """Result of delivering one payload downstream."""

    success: bool
    attempts: int
    status: Optional[int] = None
    response_body: str = ""
    error_detail: Optional[str] = None
    timed_out: bool = False
