"""
Bundled collaborators

- NuxtBuilder: SSR builder for Nuxt projects
- LocalFunctionPackager: packager writing a function archive and manifest locally
"""

from .nuxt import NuxtBuilder
from .function import LocalFunctionPackager

__all__ = [
    'NuxtBuilder',
    'LocalFunctionPackager',
]
