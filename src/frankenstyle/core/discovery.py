"""
Package discovery.

Reads installed packages from a packages directory. Each immediate
subdirectory holding a ``package.toml`` is one package::

    packages/
      brakes/
        package.toml      # name, dependencies, style
        brakes.css
        brakes.png
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from .errors import make_config_error
from .models import PackageDescriptor

logger = logging.getLogger(__name__)

PACKAGE_FILE = "package.toml"


def load_package(package_dir: Path) -> PackageDescriptor:
    """
    Load a single package descriptor.

    Args:
        package_dir: Package directory containing package.toml

    Returns:
        PackageDescriptor with the CSS source read in (None if the package
        declares no style or the style file is missing)

    Raises:
        ConfigError: If package.toml or the style file cannot be read, or
            the descriptor is malformed
    """
    package_file = package_dir / PACKAGE_FILE
    try:
        data = tomllib.loads(package_file.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise make_config_error(f"Failed to load package descriptor: {e}", package_file) from e

    name = data.get("name", package_dir.name)

    css: str | None = None
    style = data.get("style")
    if style:
        style_path = package_dir / style
        if style_path.is_file():
            try:
                css = style_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise make_config_error(f"Failed to read style: {e}", style_path, name) from e
        else:
            logger.debug("Package %s declares missing style %s", name, style_path)

    dependencies = data.get("dependencies", [])
    if not isinstance(dependencies, list) or not all(isinstance(d, str) for d in dependencies):
        raise make_config_error(
            f"dependencies must be a list of package names, got {dependencies!r}",
            package_file,
            name,
        )

    try:
        return PackageDescriptor(
            id=name,
            dependencies=tuple(dependencies),
            css=css,
            asset_dir=package_dir,
        )
    except ValidationError as e:
        raise make_config_error(f"Invalid package descriptor: {e}", package_file, name) from e


def discover_packages(packages_dir: Path) -> list[PackageDescriptor]:
    """
    Discover installed packages.

    Args:
        packages_dir: Directory whose subdirectories are packages

    Returns:
        Packages sorted by directory name
    """
    if not packages_dir.is_dir():
        raise make_config_error(f"Packages directory not found: {packages_dir}")

    packages = [
        load_package(child)
        for child in sorted(packages_dir.iterdir(), key=lambda p: p.name)
        if child.is_dir() and (child / PACKAGE_FILE).is_file()
    ]
    logger.debug("Discovered %d packages in %s", len(packages), packages_dir)
    return packages


__all__ = ["PACKAGE_FILE", "load_package", "discover_packages"]
