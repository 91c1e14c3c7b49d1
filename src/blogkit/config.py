"""Unified configuration loaded from .blogkit.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from blogkit.content.models import HeaderFormat

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".blogkit.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "blogkit" / "config.toml"


class SiteConfig(BaseModel):
    """[site] section."""

    root: str = "."
    content_dir: str = "content"
    output_dir: str = "public"


class ContentSectionConfig(BaseModel):
    """[content] section."""

    default_section: str = "posts"
    header_format: HeaderFormat = HeaderFormat.TOML


class GeneratorConfig(BaseModel):
    """[generator] section."""

    binary: str = "hugo"
    timeout: int = 300
    extra_args: list[str] = Field(default_factory=list)
    server_port: int = 1313
    server_bind: str = "127.0.0.1"


class LintConfig(BaseModel):
    """[lint] section."""

    use_container: bool = True
    runtime: str = "docker"
    image: str = "ghcr.io/igorshubovych/markdownlint-cli:latest"
    binary: str = "markdownlint"
    glob: str = ""
    config_file: str = ""
    timeout: int = 300


class BlogkitConfig(BaseModel):
    """Top-level configuration for the content, build and lint commands."""

    site: SiteConfig = Field(default_factory=SiteConfig)
    content: ContentSectionConfig = Field(default_factory=ContentSectionConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)
    lint: LintConfig = Field(default_factory=LintConfig)

    @property
    def site_root(self) -> Path:
        return Path(self.site.root).expanduser().resolve()

    @property
    def content_path(self) -> Path:
        return self.site_root / self.site.content_dir

    @property
    def output_path(self) -> Path:
        return self.site_root / self.site.output_dir

    @property
    def lint_glob(self) -> str:
        """Glob handed to the linter, relative to the site root."""
        if self.lint.glob:
            return self.lint.glob
        content_dir = self.site.content_dir.strip("/") or "."
        return f"{content_dir}/**/*.md"


def load_config(
    path: str | Path | None = None,
    *,
    root: str | Path | None = None,
) -> BlogkitConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .blogkit.toml in the site root (if ``root`` is given)
    3. .blogkit.toml in CWD
    4. ~/.config/blogkit/config.toml

    Then overlay environment variables. A relative ``site.root`` is
    taken relative to the file that sets it.

    Args:
        path: Explicit path to a TOML file.
        root: Site root passed on the command line.

    Returns:
        Merged BlogkitConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        search_dirs = list(CONFIG_SEARCH_PATHS)
        if root is not None:
            search_dirs.insert(0, Path(root))
        for search_dir in search_dirs:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    try:
        config = BlogkitConfig.model_validate(data) if data else BlogkitConfig()
    except ValidationError as exc:
        logger.warning("Invalid config, using defaults: %s", _first_error(exc))
        config = BlogkitConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: BlogkitConfig, **cli_kwargs: object) -> BlogkitConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).

    Args:
        config: Base config.
        **cli_kwargs: CLI flag values, e.g. ``site_root``, ``output_dir``,
            ``generator``, ``port``.

    Returns:
        Updated config with CLI overrides applied.
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "site_root": ("site", "root"),
        "content_dir": ("site", "content_dir"),
        "output_dir": ("site", "output_dir"),
        "generator": ("generator", "binary"),
        "port": ("generator", "server_port"),
        "bind": ("generator", "server_bind"),
        "lint_glob": ("lint", "glob"),
        "lint_container": ("lint", "use_container"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = str(value) if isinstance(value, Path) else value
        else:
            logger.debug("Ignoring unknown CLI override %s", key)

    return BlogkitConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}

    site = data.get("site")
    if isinstance(site, dict) and isinstance(site.get("root"), str):
        site_root = Path(site["root"]).expanduser()
        if not site_root.is_absolute():
            site["root"] = str(path.parent / site_root)
    return data


def _apply_env_vars(config: BlogkitConfig) -> BlogkitConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "BLOGKIT_SITE_ROOT": ("site", "root"),
        "BLOGKIT_OUTPUT_DIR": ("site", "output_dir"),
        "BLOGKIT_GENERATOR": ("generator", "binary"),
        "BLOGKIT_CONTAINER_RUNTIME": ("lint", "runtime"),
        "BLOGKIT_LINT_IMAGE": ("lint", "image"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    container_raw = os.environ.get("BLOGKIT_LINT_CONTAINER")
    if container_raw is not None:
        data["lint"]["use_container"] = container_raw.lower() in ("true", "1", "yes")

    try:
        return BlogkitConfig.model_validate(data)
    except ValidationError as exc:
        logger.warning("Ignoring invalid BLOGKIT_* environment: %s", _first_error(exc))
        return config


def _first_error(exc: ValidationError) -> str:
    """One-line ``field: message`` summary of a validation failure."""
    err = exc.errors()[0]
    field = ".".join(str(loc) for loc in err["loc"])
    return f"{field}: {err['msg']}"
