"""
SSR Deploy Data Classes

- artifacts: FunctionDescriptor, BuildOutput
- packaging: FunctionSpec, PackagingConfig
- contexts: PluginContext
"""

from .artifacts import FunctionDescriptor, BuildOutput
from .packaging import FunctionSpec, PackagingConfig
from .contexts import PluginContext

__all__ = [
    'FunctionDescriptor',
    'BuildOutput',
    'FunctionSpec',
    'PackagingConfig',
    'PluginContext',
]
