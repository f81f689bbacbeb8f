"""
Settings Factory

Factory to create settings instances without using singleton pattern.
Provides methods to create individual setting objects as needed.
"""

from pathlib import Path

from reqmate.utils.settings.core import ConfluenceSettings, AppSettings


class SettingsFactory:
    """Factory for creating settings instances"""

    @staticmethod
    def create_confluence_settings(env_path: str | Path | None = None) -> ConfluenceSettings:
        """Create Confluence settings instance"""
        if env_path:
            return ConfluenceSettings.from_env_file(env_path)
        return ConfluenceSettings()

    @staticmethod
    def create_app_settings(env_path: str | Path | None = None) -> AppSettings:
        """Create app settings instance"""
        if env_path:
            return AppSettings.from_env_file(env_path)
        return AppSettings()


# Convenience factory instance for easy importing
settings_factory = SettingsFactory()
