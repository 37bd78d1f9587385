"""Static analysis lints for programs using the Bevy game engine."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("bevy-lint")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0-dev"

__all__ = ["__version__"]
