"""
Components of the version-detection pipeline.
Provides VersionExtractor, ResourceLocator, ChangeDetector, and AssetArchiver.
"""
from services.components.version_extractor import VersionExtractor, extract_version
from services.components.resource_locator import ResourceLocator, LocatorStage
from services.components.change_detector import ChangeDetector
from services.components.asset_archiver import AssetArchiver

__all__ = [
    "VersionExtractor",
    "extract_version",
    "ResourceLocator",
    "LocatorStage",
    "ChangeDetector",
    "AssetArchiver",
]
