from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

from models.target import Target


class ArchiveResult(BaseModel):
    """Outcome of archiving a single asset file."""

    asset_name: str
    url: str
    path: Optional[Path] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CheckResult(BaseModel):
    """Outcome of one poll of one target."""

    target: Target
    version: str  # From the bootstrap script
    resource_path: str
    archive_version: str  # Trailing segment of resource_path, used for archival
    is_new: bool = False
    assets: List[ArchiveResult] = Field(default_factory=list)

    @property
    def failed_assets(self) -> List[ArchiveResult]:
        return [a for a in self.assets if not a.ok]
