"""flymap — declarative object-to-object mapping specifications."""

from flymap.mapping import new_specification

__version__ = "0.1.0"

__all__ = ["new_specification", "__version__"]
