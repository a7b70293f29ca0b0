"""Configuration loading for ecodocs (.ecodocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

CONFIG_FILENAME = ".ecodocs.yml"
DEFAULT_MANIFEST = "package.json"
DEFAULT_DOCUMENT = "ecosystem.json"
DEFAULT_UPDATED_BY = "ecodocs"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class ComponentSpec:
    """Skeleton entry for a documented component."""

    key: str
    description: str
    status: str = "active"


REQUIRED_COMPONENTS = (
    ComponentSpec(key="core", description="Core protocol contracts"),
    ComponentSpec(key="periphery", description="Peripheral contracts and utilities"),
)

DEFAULT_DOCUMENTATION = {
    "readme": "README.md",
    "changelog": "CHANGELOG.md",
    "contributing": "CONTRIBUTING.md",
}


@dataclass
class SyncConfig:
    """Settings for a single synchronisation run."""

    root: Path
    manifest_path: Path
    document_path: Path
    dry_run: bool = False
    verbose: bool = False
    updated_by: str = DEFAULT_UPDATED_BY
    documentation: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DOCUMENTATION))
    components: List[ComponentSpec] = field(default_factory=lambda: list(REQUIRED_COMPONENTS))


def load_config(
    root: Path,
    *,
    manifest_path: Optional[Path] = None,
    document_path: Optional[Path] = None,
    dry_run: bool = False,
    verbose: bool = False,
    config_file: Optional[Path] = None,
) -> SyncConfig:
    """Build the run configuration from ``.ecodocs.yml`` and explicit overrides."""
    root = root.expanduser().resolve()
    source = _resolve(root, config_file) if config_file else root / CONFIG_FILENAME

    data: Dict[str, Any] = {}
    if source.exists():
        data = _read_config(source)
    elif config_file is not None:
        raise ConfigError(f"Configuration file {source} does not exist")

    manifest = manifest_path or _as_path(data.get("manifest")) or Path(DEFAULT_MANIFEST)
    document = document_path or _as_path(data.get("output")) or Path(DEFAULT_DOCUMENT)

    documentation = dict(DEFAULT_DOCUMENTATION)
    documentation.update(_as_str_mapping(data.get("documentation")))

    return SyncConfig(
        root=root,
        manifest_path=_resolve(root, manifest),
        document_path=_resolve(root, document),
        dry_run=dry_run,
        verbose=verbose,
        updated_by=_as_str(data.get("updated_by")) or DEFAULT_UPDATED_BY,
        documentation=documentation,
        components=_components(data.get("components")),
    )


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _components(value: Any) -> List[ComponentSpec]:
    specs: Dict[str, ComponentSpec] = {spec.key: spec for spec in REQUIRED_COMPONENTS}
    for key, raw in _as_dict(value).items():
        key = str(key)
        default = specs.get(key)
        if isinstance(raw, Mapping):
            description = _as_str(raw.get("description"))
            status = _as_str(raw.get("status"))
        else:
            description, status = _as_str(raw), None
        specs[key] = ComponentSpec(
            key=key,
            description=description or (default.description if default else ""),
            status=status or (default.status if default else "active"),
        )
    return list(specs.values())


def _resolve(root: Path, path: Path) -> Path:
    path = path.expanduser()
    return path if path.is_absolute() else root / path


def _as_path(value: Any) -> Optional[Path]:
    text = _as_str(value)
    return Path(text) if text else None


def _as_dict(value: Any) -> Dict[Any, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_mapping(value: Any) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for key, item in _as_dict(value).items():
        text = _as_str(item)
        if text is not None:
            result[str(key)] = text
    return result


__all__ = [
    "CONFIG_FILENAME",
    "ComponentSpec",
    "ConfigError",
    "REQUIRED_COMPONENTS",
    "SyncConfig",
    "load_config",
]
