"""Loads plugin manifests (``plugInfo.yaml`` / ``plugInfo.json``)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Tuple

import yaml
from pydantic import ValidationError

from .exceptions import ManifestLoadError
from .schemas import PluginInfoDocument, PluginManifest

MANIFEST_FILE_NAMES = ("plugInfo.yaml", "plugInfo.yml", "plugInfo.json")


def load_manifest_file(path: Path) -> List[PluginManifest]:
    """Load every plugin declared in one manifest file.

    Raises:
        ManifestLoadError: If the file is missing, unparsable or malformed
    """
    path = Path(path)
    if not path.exists():
        raise ManifestLoadError(str(path), "File not found")
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestLoadError(str(path), f"Invalid YAML: {e}")
    except json.JSONDecodeError as e:
        raise ManifestLoadError(str(path), f"Invalid JSON: {e}")
    except OSError as e:
        raise ManifestLoadError(str(path), str(e))

    if data is None:
        return []
    try:
        document = PluginInfoDocument.model_validate(data)
    except ValidationError as e:
        raise ManifestLoadError(str(path), f"Invalid manifest: {e}")

    return [plugin.model_copy(update={"path": str(path)}) for plugin in document.plugins]


def find_manifest_files(search_paths: Iterable[Path]) -> List[Path]:
    """Expand search paths into manifest files.

    A path naming a file is used as-is. A directory contributes its own
    manifest and those of its immediate subdirectories.
    """
    found: List[Path] = []
    for entry in search_paths:
        entry = Path(entry)
        if entry.is_file():
            found.append(entry)
            continue
        if not entry.is_dir():
            continue
        candidates = [entry] + sorted(p for p in entry.iterdir() if p.is_dir())
        for directory in candidates:
            for file_name in MANIFEST_FILE_NAMES:
                manifest = directory / file_name
                if manifest.is_file():
                    found.append(manifest)
                    break
    return found


def load_manifests(
    search_paths: Iterable[Path],
) -> Tuple[List[PluginManifest], List[ManifestLoadError]]:
    """Load all manifests under the search paths.

    A broken manifest does not stop the others from loading; its error is
    returned alongside the manifests that loaded.
    """
    manifests: List[PluginManifest] = []
    errors: List[ManifestLoadError] = []
    for path in find_manifest_files(search_paths):
        try:
            manifests.extend(load_manifest_file(path))
        except ManifestLoadError as e:
            errors.append(e)
    return manifests, errors
