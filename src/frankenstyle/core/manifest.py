import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from .errors import make_config_error
from .models import AssemblyConfig, UrlStyle

MANIFEST_NAME = "frankenstyle.toml"


@dataclass
class BuildConfig:
    """Stylesheet build options.

    Examples in frankenstyle.toml:

        [build]
        output = "public"
        whitelist = ["timeTravel", "delorean", "focus"]
        cached = true
        url_style = "helper"  # asset-url() for the Rails asset pipeline
    """

    output: str | None = None
    stylesheet: str = "components.css"
    whitelist: list[str] = field(default_factory=list)
    cached: bool = False
    url_style: str = "literal"  # "literal" | "helper"
    workers: int = 1
    cache_dir: str | None = None


@dataclass
class ProjectManifest:
    """
    Project manifest loaded from frankenstyle.toml.

    Relative paths are resolved against ``root``, the manifest's directory.
    """

    name: str
    root: Path
    packages_dir: str = "./packages"
    build: BuildConfig = field(default_factory=BuildConfig)

    @property
    def packages_path(self) -> Path:
        return (self.root / self.packages_dir).resolve()

    @property
    def output_path(self) -> Path | None:
        if not self.build.output:
            return None
        return (self.root / self.build.output).resolve()

    def to_config(self) -> AssemblyConfig:
        """Convert build options to an AssemblyConfig."""
        cache_dir = (self.root / self.build.cache_dir).resolve() if self.build.cache_dir else None
        try:
            return AssemblyConfig(
                cached=self.build.cached,
                url_style=UrlStyle(self.build.url_style),
                whitelist=frozenset(self.build.whitelist) or None,
                workers=self.build.workers,
                cache_dir=cache_dir,
            )
        except (ValidationError, ValueError) as e:
            raise make_config_error(
                f"Invalid build configuration: {e}", self.root / MANIFEST_NAME
            ) from e


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise make_config_error(f"Failed to load manifest: {e}", path) from e

    project = data.get("project", {})
    build_data = data.get("build", {})

    whitelist = build_data.get("whitelist", [])
    if not isinstance(whitelist, list) or not all(isinstance(w, str) for w in whitelist):
        raise make_config_error(
            f"[build] whitelist must be a list of package names, got {whitelist!r}", path
        )

    build_config = BuildConfig(
        output=build_data.get("output"),
        stylesheet=build_data.get("stylesheet", "components.css"),
        whitelist=whitelist,
        cached=build_data.get("cached", False),
        url_style=build_data.get("url_style", "literal"),
        workers=build_data.get("workers", 1),
        cache_dir=build_data.get("cache_dir"),
    )

    return ProjectManifest(
        name=project.get("name", path.parent.name),
        root=path.parent,
        packages_dir=project.get("packages", "./packages"),
        build=build_config,
    )


def load_project_manifest(project_root: Path, manifest_path: Path | None = None) -> ProjectManifest:
    """
    Load the project manifest, falling back to defaults when there is none.

    Args:
        project_root: Project root directory
        manifest_path: Explicit manifest path (must exist if given)

    Returns:
        ProjectManifest
    """
    if manifest_path is not None:
        return load_manifest(manifest_path)

    default_path = project_root / MANIFEST_NAME
    if default_path.exists():
        return load_manifest(default_path)
    return ProjectManifest(name=project_root.name, root=project_root)


__all__ = [
    "MANIFEST_NAME",
    "BuildConfig",
    "ProjectManifest",
    "load_manifest",
    "load_project_manifest",
]
