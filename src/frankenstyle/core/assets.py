"""Copy package image assets next to the generated stylesheet."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from .models import PackageDescriptor

logger = logging.getLogger(__name__)

ASSET_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"})


def copy_assets(packages: Iterable[PackageDescriptor], output_dir: Path) -> list[Path]:
    """
    Copy each package's image files into ``output_dir/<package_id>/``.

    Subdirectories inside the package are preserved, matching the paths the
    url rewriter produces.

    Args:
        packages: Packages whose assets to copy
        output_dir: Output directory

    Returns:
        Paths of the copied files
    """
    written: list[Path] = []
    for package in packages:
        if package.asset_dir is None or not package.asset_dir.is_dir():
            continue
        for source in sorted(package.asset_dir.rglob("*")):
            if not source.is_file() or source.suffix.lower() not in ASSET_EXTENSIONS:
                continue
            target = output_dir / package.id / source.relative_to(package.asset_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            written.append(target)

    logger.debug("Copied %d asset files into %s", len(written), output_dir)
    return written


__all__ = ["ASSET_EXTENSIONS", "copy_assets"]
