"""Configuration module for the KbRemote client."""
from .settings import ClientConfig, load_settings

__all__ = ["ClientConfig", "load_settings"]
