from casync.config.settings import DEFAULT_MANAGED_PREFIX, Settings, load_settings

__all__ = ["DEFAULT_MANAGED_PREFIX", "Settings", "load_settings"]
