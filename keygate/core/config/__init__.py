"""
Core Configuration Module
Provides centralized configuration management for the gateway
"""
from .base import Settings, get_settings
from .logging import LogConfig

__all__ = ['Settings', 'get_settings', 'LogConfig']
