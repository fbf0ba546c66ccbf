"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local enumsync package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of enumsync modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("enumsync"):
        del sys.modules[module_name]

from tests.fixtures import EnumProject, new_package_name  # noqa: E402


@pytest.fixture
def enum_project(tmp_path: Path) -> Iterator[EnumProject]:
    """An empty project root with a uniquely named top-level package."""
    root = tmp_path / "project"
    root.mkdir()
    project = EnumProject(root=root, package=new_package_name())
    yield project
    project.unload()


@pytest.fixture(autouse=True)
def _no_global_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Keep the developer's ~/.config/enumsync out of every test."""
    missing = tmp_path_factory.mktemp("home") / "config.yaml"
    monkeypatch.setattr("enumsync.config.loader.GLOBAL_CONFIG_PATH", missing)
