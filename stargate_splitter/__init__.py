"""Top-level package for Stargate bridge-splitter payload tooling."""

from importlib import metadata


def __getattr__(name: str) -> str:
    """Expose the package version via ``stargate_splitter.__version__``."""
    if name == "__version__":
        try:
            return metadata.version("stargate-splitter")
        except metadata.PackageNotFoundError:
            return "0.0.0"
    raise AttributeError(name)


__all__ = ["__version__"]
