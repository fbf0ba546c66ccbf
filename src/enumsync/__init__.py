"""enumsync - keep TypeScript enum modules in sync with Python enums."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("enumsync")
except PackageNotFoundError:
    __version__ = "dev"
