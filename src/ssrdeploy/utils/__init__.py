"""
SSR Deploy Utils Module

- logger: Logging setup and configuration
- reflection: Loading collaborators from dotted paths

Usage:
    from ssrdeploy.utils import setup_logger, load_object
"""

from .logger import setup_logger, parse_module_levels
from .reflection import load_object

__all__ = [
    'setup_logger',
    'parse_module_levels',
    'load_object',
]
