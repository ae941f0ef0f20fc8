# Settings package
from core.settings.engine_settings import EngineSettings, get_engine_settings

__all__ = ["EngineSettings", "get_engine_settings"]
