"""
SSR Deploy Builder Module

- DependencyInstaller: Conditional dependency install
- BuildExecutor: Build command plus SSR builder invocation
- ArtifactAdapter: Build output to packaging configuration
- DeploymentCoordinator: Packager deploy followed by cleanup

Usage:
    from ssrdeploy.builder import BuildExecutor, ArtifactAdapter

    output = await BuildExecutor(ssr_builder, project_path).build(inputs)
    packaging = ArtifactAdapter().adapt(output, inputs)
"""

from .install import DependencyInstaller
from .build import BuildExecutor
from .adapter import ArtifactAdapter
from .deploy import DeploymentCoordinator

__all__ = [
    'DependencyInstaller',
    'BuildExecutor',
    'ArtifactAdapter',
    'DeploymentCoordinator',
]
