"""
Utilities Module
================

Shared helpers:
- logger: context-aware logging with an optional file sink
- config: environment-driven configuration
"""

from robin.utils.logger import Logger, configure_log_file
from robin.utils.config import get_config, load_knowledge_config, Config

__all__ = [
    "Logger",
    "configure_log_file",
    "get_config",
    "load_knowledge_config",
    "Config",
]
