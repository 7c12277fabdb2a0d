import logging

from ..protocols import FunctionPackagerProtocol, SSRBuilderProtocol

logger = logging.getLogger(__name__)


class DeploymentCoordinator:
    """Deploys through the packager, then cleans the SSR build temporaries."""

    def __init__(self, ssr_builder: SSRBuilderProtocol):
        self.ssr_builder = ssr_builder

    async def deploy(self, packager: FunctionPackagerProtocol, name: str = "") -> None:
        # Cleanup only follows a successful deploy; a failed deploy leaves the temporaries.
        await packager.deploy()
        logger.debug("[DeploymentCoordinator] Deploy finished, cleaning build artifacts...")
        await self.ssr_builder.clean()
        logger.info(f"🚀 SSR application{' ' + repr(name) if name else ''} deployed successfully")
