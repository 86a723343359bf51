from minisnap_core.config import AppConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "__version__",
    "load_config",
]
