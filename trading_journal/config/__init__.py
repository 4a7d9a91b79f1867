"""Configuration package for the Trading Journal gateway."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
