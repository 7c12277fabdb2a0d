"""
SSR Deploy Protocol Definitions

This module contains all Protocol definitions for the collaborators the
lifecycle plugin drives.

Protocols are the foundation layer with zero dependencies on other ssrdeploy modules.
"""

from typing import Protocol, Dict, Any, runtime_checkable


# ============================================================================
# Collaborator Protocols
# ============================================================================

@runtime_checkable
class SSRBuilderProtocol(Protocol):
    """
    Protocol for SSR build tools.

    Builders turn an SSR project into one or more serverless-function units.
    """

    async def build(self, entry: str, options: Dict[str, str]) -> Any:
        """
        Build the project found at `entry`.

        Args:
            entry: Directory holding the SSR framework config
            options: Sub-configuration {"name": ..., "path": ...}

        Returns:
            BuildOutput (or a mapping of the same shape)
        """
        ...

    async def clean(self) -> None:
        """Remove temporary build artifacts."""
        ...


@runtime_checkable
class FunctionPackagerProtocol(Protocol):
    """
    Protocol for function packaging/deployment collaborators.

    A packager is constructed from a PackagingConfig and owns both the compile
    and deploy steps of the function artifact.
    """

    async def compile(self) -> Any:
        """Produce the deployable artifact description."""
        ...

    async def deploy(self) -> None:
        """Deploy the function behind its service paths."""
        ...


@runtime_checkable
class PackagerFactoryProtocol(Protocol):
    """
    Protocol for callables constructing a packager.

    Packager classes themselves satisfy it.
    """

    def __call__(self, config: Any, context: Any) -> FunctionPackagerProtocol:
        ...


# ============================================================================
# Plugin Protocol
# ============================================================================

@runtime_checkable
class PluginProtocol(Protocol):
    """
    Protocol for lifecycle plugins.

    The host invokes one stage at a time, in order.
    """

    async def init(self) -> None:
        ...

    async def build(self) -> None:
        ...

    async def compile(self) -> Any:
        ...

    async def deploy(self) -> None:
        ...

    async def remove(self) -> None:
        ...
