import logging
from pathlib import Path
from typing import Optional

from .. import constants
from ..process import CommandRunner, run_command

logger = logging.getLogger(__name__)


class DependencyInstaller:
    """Runs the install command when the project carries a dependency manifest."""

    def __init__(self, project_path: Path, runner: CommandRunner = run_command):
        self.project_path = Path(project_path)
        self.runner = runner

    @property
    def manifest(self) -> Path:
        return self.project_path / constants.MANIFEST_FILENAME

    async def maybe_install(self, install_command: str, stage: Optional[str] = None) -> bool:
        """
        Install dependencies if a manifest is present.

        Returns:
            True if the install command ran, False if it was skipped
        """
        if not self.manifest.is_file():
            logger.debug(f"[Installer] No '{constants.MANIFEST_FILENAME}' in '{self.project_path}', skipping install.")
            return False
        if not install_command:
            logger.debug("[Installer] No install command configured, skipping install.")
            return False

        logger.info(f"[Installer] Installing dependencies: {install_command}")
        await self.runner(install_command, cwd=self.project_path, stage=stage)
        return True
