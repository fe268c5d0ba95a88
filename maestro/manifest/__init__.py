"""Manifest handling -- parse task blocks and write outcomes back.

Public API::

    from maestro.manifest import ManifestFile, ManifestLocks, ManifestParser, update_manifest_text
"""

from maestro.manifest.parser import ManifestParser, TaskBuilder
from maestro.manifest.updater import ManifestFile, ManifestLocks, update_manifest_text

__all__ = [
    "ManifestFile",
    "ManifestLocks",
    "ManifestParser",
    "TaskBuilder",
    "update_manifest_text",
]
