import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from ..config import ResolvedInputs
from ..datacls import BuildOutput
from ..exceptions import BuildOutputError
from ..process import CommandRunner, run_command
from ..protocols import SSRBuilderProtocol

logger = logging.getLogger(__name__)


class BuildExecutor:
    """
    Runs the optional build command, then the SSR builder.

    The builder is only invoked after the command's process has exited, since
    it reads what the command wrote to disk.
    """

    def __init__(self, ssr_builder: SSRBuilderProtocol, project_path: Path, runner: CommandRunner = run_command):
        self.ssr_builder = ssr_builder
        self.project_path = Path(project_path)
        self.runner = runner

    async def build(self, config: ResolvedInputs, stage: Optional[str] = None) -> BuildOutput:
        if config.build_command:
            logger.info(f"[BuildExecutor] Running build command: {config.build_command}")
            await self.runner(config.build_command, cwd=self.project_path, stage=stage)
        else:
            logger.debug("[BuildExecutor] No build command configured.")

        logger.debug(f"[BuildExecutor] Invoking SSR builder on '{config.entry}' as '{config.name}' -> '{config.path}'")
        result = await self.ssr_builder.build(config.entry, {"name": config.name, "path": config.path})
        output = self._coerce(result)
        logger.info(f"[BuildExecutor] SSR build produced {len(output.functions)} function(s).")
        return output

    @staticmethod
    def _coerce(result: Any) -> BuildOutput:
        if isinstance(result, BuildOutput):
            return result
        try:
            return BuildOutput.model_validate(result)
        except ValidationError as e:
            raise BuildOutputError(f"SSR builder returned a malformed build output:\n{e}")
