"""Configuration management for calrule."""

from .settings import CalRuleSettings, LoggingSettings, get_settings, reset_settings

__all__ = ["CalRuleSettings", "LoggingSettings", "get_settings", "reset_settings"]
