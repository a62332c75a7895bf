"""Converter options and project configuration loading."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older interpreters
    tomllib = None  # type: ignore

from .errors import ConverterConfigError, UnsupportedTargetError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "component-converter.toml"
PYPROJECT_SECTION = ("tool", "component-converter")


class Target(str, Enum):
    SVELTE = "svelte"
    VUE = "vue"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union[str, "Target"]) -> "Target":
        if isinstance(value, Target):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedTargetError(f"Unsupported target '{value}'") from None


DEFAULT_CLASS_MERGE_PATHS: Dict[Target, str] = {
    Target.SVELTE: "$lib/utils",
    Target.VUE: "@/lib/utils",
}


@dataclass
class SvelteOptions:
    """Svelte output flavour. Runes need version 5."""

    version: int = 5
    use_runes: bool = True

    @property
    def runes(self) -> bool:
        return self.version >= 5 and self.use_runes


@dataclass
class VueOptions:
    script_setup: bool = True


@dataclass
class ConverterOptions:
    """Options for a single conversion run."""

    target: Target = Target.SVELTE
    typescript: bool = True
    emit_formatted: bool = False
    class_merge_import_path: Optional[str] = None
    svelte: SvelteOptions = field(default_factory=SvelteOptions)
    vue: VueOptions = field(default_factory=VueOptions)
    format_timeout: float = 10.0
    normalize_primitives: bool = True
    target_component: Optional[str] = None

    def __post_init__(self) -> None:
        self.target = Target.parse(self.target)
        if self.svelte.version not in (4, 5):
            raise ConverterConfigError(
                f"Unsupported Svelte version {self.svelte.version}",
                hint="Use 4 or 5.",
            )
        if self.format_timeout <= 0:
            raise ConverterConfigError("format_timeout must be positive")
        if not self.vue.script_setup:
            raise ConverterConfigError(
                "Vue output only supports <script setup>",
                hint="Remove 'script_setup = false' from the [vue] table.",
            )

    @property
    def class_merge_path(self) -> str:
        if self.class_merge_import_path:
            return self.class_merge_import_path
        return DEFAULT_CLASS_MERGE_PATHS[self.target]

    def merged(self, **overrides: Any) -> "ConverterOptions":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        svelte_version = values.pop("svelte_version", None)
        use_runes = values.pop("use_runes", None)
        svelte = self.svelte
        if svelte_version is not None or use_runes is not None:
            svelte = SvelteOptions(
                version=svelte_version if svelte_version is not None else svelte.version,
                use_runes=use_runes if use_runes is not None else svelte.use_runes,
            )
        return replace(self, svelte=svelte, **values)


def _read_toml(path: Path) -> Dict[str, Any]:
    if tomllib is None:  # pragma: no cover - exercised only on old interpreters
        raise ConverterConfigError("TOML configuration requires Python 3.11 or newer")
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConverterConfigError(f"Failed to read {path}: {exc}", path=str(path)) from exc


def _section(raw: Mapping[str, Any], path: Path) -> Dict[str, Any]:
    if path.name == "pyproject.toml":
        data: Any = raw
        for key in PYPROJECT_SECTION:
            data = data.get(key, {}) if isinstance(data, Mapping) else {}
        return dict(data)
    return dict(raw)


def options_from_mapping(data: Mapping[str, Any], *, source: Optional[str] = None) -> ConverterOptions:
    """Build options from a TOML table, rejecting unknown keys."""
    known = {
        "target",
        "typescript",
        "emit_formatted",
        "class_merge_import_path",
        "format_timeout",
        "normalize_primitives",
        "svelte",
        "vue",
    }
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConverterConfigError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            path=source,
        )
    svelte_raw = data.get("svelte", {}) or {}
    vue_raw = data.get("vue", {}) or {}
    if not isinstance(svelte_raw, Mapping) or not isinstance(vue_raw, Mapping):
        raise ConverterConfigError("'svelte' and 'vue' must be tables", path=source)
    try:
        return ConverterOptions(
            target=data.get("target", Target.SVELTE),
            typescript=bool(data.get("typescript", True)),
            emit_formatted=bool(data.get("emit_formatted", False)),
            class_merge_import_path=data.get("class_merge_import_path"),
            format_timeout=float(data.get("format_timeout", 10.0)),
            normalize_primitives=bool(data.get("normalize_primitives", True)),
            svelte=SvelteOptions(
                version=int(svelte_raw.get("version", 5)),
                use_runes=bool(svelte_raw.get("use_runes", True)),
            ),
            vue=VueOptions(script_setup=bool(vue_raw.get("script_setup", True))),
        )
    except (TypeError, ValueError) as exc:
        raise ConverterConfigError(f"Invalid configuration value: {exc}", path=source) from exc


def find_config_file(start: Path) -> Optional[Path]:
    """Walk upwards from ``start`` looking for a converter config or pyproject."""
    current = start if start.is_dir() else start.parent
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        pyproject = directory / "pyproject.toml"
        if pyproject.exists():
            raw = _read_toml(pyproject)
            if _section(raw, pyproject):
                return pyproject
    return None


def load_config(path: Optional[Path] = None, *, start: Optional[Path] = None) -> ConverterOptions:
    """
    Load converter options.

    An explicit ``path`` must exist. Without one the search starts at
    ``start`` (default: the working directory); when nothing is found the
    defaults are returned.
    """
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConverterConfigError(f"Configuration file not found: {config_path}", path=str(config_path))
    else:
        config_path = find_config_file(Path(start) if start is not None else Path.cwd())
        if config_path is None:
            logger.debug("No converter configuration found, using defaults")
            return ConverterOptions()
    logger.debug(f"Loading converter configuration from {config_path}")
    raw = _read_toml(config_path)
    return options_from_mapping(_section(raw, config_path), source=str(config_path))


__all__ = [
    "CONFIG_FILENAME",
    "Target",
    "DEFAULT_CLASS_MERGE_PATHS",
    "SvelteOptions",
    "VueOptions",
    "ConverterOptions",
    "options_from_mapping",
    "find_config_file",
    "load_config",
]
