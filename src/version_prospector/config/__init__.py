"""
Configuration for version_prospector.

:mod:`version_prospector.config.options` defines the options value passed
to the engine and :mod:`version_prospector.config.loader` reads the optional
per-repository ``.prospector.json`` file.
"""

from .loader import ConfigError, load_config, options_from_config  # noqa: F401
from .options import ProspectorOptions  # noqa: F401
