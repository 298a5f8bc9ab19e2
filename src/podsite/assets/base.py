"""Base class for entry-point asset bundlers."""

from abc import ABC, abstractmethod
from pathlib import Path


class Bundler(ABC):
    """Compile one configured entry file into a minified bundle.

    Any other path handed to `compile` is ignored, which lets the build
    offer every stylesheet or script to the bundler without emitting the
    partials it imports.
    """

    def __init__(self, entry: Path) -> None:
        """Initialize bundler.

        Args:
            entry: Path of the entry file
        """
        self.entry = entry

    def is_entry(self, path: Path) -> bool:
        return path.resolve() == self.entry.resolve()

    def compile(self, path: Path) -> str | None:
        """Bundle `path` if it is the entry file.

        Returns:
            Minified bundle text, or None for non-entry paths
        """
        if not self.is_entry(path):
            return None
        return self.bundle(path)

    @abstractmethod
    def bundle(self, path: Path) -> str:
        """Resolve imports starting at `path` and return the minified result.

        Raises:
            BundleError: If a file cannot be read or an import cannot be resolved
        """
        ...
