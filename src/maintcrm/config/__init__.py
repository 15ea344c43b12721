"""Configuration management."""
from maintcrm.config.settings import Config
from maintcrm.config.path_resolver import PathResolver
from maintcrm.config.constants import *

__all__ = [
    "Config",
    "PathResolver",
]
