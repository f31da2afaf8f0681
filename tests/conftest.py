"""Shared pytest fixtures for Frankenstyle tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from frankenstyle.core.models import PackageDescriptor

# Package graph of the dummy "myApp" project, in installed order.
CAR_GRAPH: dict[str, list[str]] = {
    "tires": [],
    "brakes": ["drums", "calipers"],
    "calipers": [],
    "drums": [],
    "delorean": ["brakes", "tires", "mr-fusion"],
    "mr-fusion": [],
    "focus": ["brakes", "tires"],
    "f150": ["truck-tires", "truck-bed", "cowboy-hat"],
    "truck-tires": [],
    "cowboy-hat": [],
    "truck-bed": ["gate"],
    "gate": [],
    "timeTravel": ["delorean", "88-mph"],
    "88-mph": [],
}

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def package_css(package_id: str) -> str:
    return f".{package_id} {{background: url('{package_id}.png')}}\n"


def make_package(
    package_id: str, dependencies: list[str] | None = None, **kwargs
) -> PackageDescriptor:
    kwargs.setdefault("css", package_css(package_id))
    return PackageDescriptor(id=package_id, dependencies=tuple(dependencies or []), **kwargs)


@pytest.fixture
def package() -> Callable[..., PackageDescriptor]:
    """Return a factory for packages with a default one-line stylesheet."""
    return make_package


@pytest.fixture
def car_packages() -> list[PackageDescriptor]:
    """Return the installed packages of the dummy project."""
    return [make_package(pid, deps) for pid, deps in CAR_GRAPH.items()]


@pytest.fixture
def assert_before() -> Callable[[str, str, str], None]:
    """Return an assertion that one package's rule precedes another's."""

    def _assert_before(css: str, first: str, second: str) -> None:
        first_pos = css.find(f".{first} {{")
        second_pos = css.find(f".{second} {{")
        assert first_pos != -1, f"{first} missing from stylesheet"
        assert second_pos != -1, f"{second} missing from stylesheet"
        assert first_pos < second_pos, f"expected {first} before {second}"

    return _assert_before


@pytest.fixture
def car_project(tmp_path: Path) -> Path:
    """Create the dummy project on disk and return its root."""
    packages_dir = tmp_path / "packages"
    for package_id, deps in CAR_GRAPH.items():
        package_dir = packages_dir / package_id
        package_dir.mkdir(parents=True)
        deps_toml = ", ".join(f'"{dep}"' for dep in deps)
        (package_dir / "package.toml").write_text(
            f'name = "{package_id}"\n'
            f"dependencies = [{deps_toml}]\n"
            f'style = "{package_id}.css"\n'
        )
        (package_dir / f"{package_id}.css").write_text(package_css(package_id))
        (package_dir / f"{package_id}.png").write_bytes(PNG_BYTES)

    (tmp_path / "frankenstyle.toml").write_text('[project]\nname = "myApp"\n')
    return tmp_path
