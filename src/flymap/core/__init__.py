"""flymap core — configuration loading and binding."""

from flymap.core.config import Config, config_properties

__all__ = ["Config", "config_properties"]
