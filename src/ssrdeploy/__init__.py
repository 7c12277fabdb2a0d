"""
SSR Deploy

Builds a server-rendered (Nuxt) project and deploys it as a routed serverless
function, driven through an ordered lifecycle: init, build, compile, deploy, remove.

Main modules:
- config: Input resolution and project file loading
- builder: Install, build, adapt and deploy steps
- plugin: The lifecycle state machine
- bases: Bundled Nuxt builder and local function packager
- pipeline: CI pipeline rendering
- datacls: Type-safe data classes and models
- utils: Logging and reflection helpers

Quick start example:
```python
import asyncio
from pathlib import Path
from ssrdeploy import NuxtPlugin, PluginContext
from ssrdeploy.bases import NuxtBuilder, LocalFunctionPackager

context = PluginContext(project_path=Path("."))
plugin = NuxtPlugin({"memory": 256}, NuxtBuilder(context.project_path), LocalFunctionPackager, context)
await plugin.run()
```
"""

__version__ = "0.1.0"

from .protocols import SSRBuilderProtocol, FunctionPackagerProtocol, PluginProtocol
from .config import Config, ResolvedInputs, resolve_inputs
from .datacls import BuildOutput, FunctionDescriptor, PackagingConfig, FunctionSpec, PluginContext
from .plugin import NuxtPlugin, create_plugin
from .constants import Stage, LifecycleState
from .exceptions import (
    SSRDeployError,
    ConfigurationError,
    ConfigValidationError,
    PreconditionError,
    StageOrderError,
    CommandFailedError,
    EmptyBuildOutputError,
)

__all__ = [
    # Version
    '__version__',
    # Protocols
    'SSRBuilderProtocol',
    'FunctionPackagerProtocol',
    'PluginProtocol',
    # Config
    'Config',
    'ResolvedInputs',
    'resolve_inputs',
    # Data classes
    'BuildOutput',
    'FunctionDescriptor',
    'PackagingConfig',
    'FunctionSpec',
    'PluginContext',
    # Lifecycle
    'NuxtPlugin',
    'create_plugin',
    'Stage',
    'LifecycleState',
    # Exceptions
    'SSRDeployError',
    'ConfigurationError',
    'ConfigValidationError',
    'PreconditionError',
    'StageOrderError',
    'CommandFailedError',
    'EmptyBuildOutputError',
]
