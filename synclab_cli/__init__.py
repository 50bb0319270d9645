"""synclab command line interface."""
from synclab import __version__

__all__ = ["__version__"]
