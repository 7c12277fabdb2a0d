import asyncio
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .. import constants
from ..datacls import PackagingConfig, PluginContext
from ..exceptions import PackagingError

logger = logging.getLogger(__name__)


class LocalFunctionPackager:
    """
    Packages functions into a local output directory.

    `compile()` returns the deployment manifest; `deploy()` writes it as
    `function.yml` next to a zip archive of the function root. Runtime, memory
    and timeout are checked on construction.
    """

    def __init__(self, config: PackagingConfig, context: Optional[PluginContext] = None):
        self.config = config
        self.context = context or PluginContext()
        self.output_dir = Path(
            self.context.output_dir
            if self.context.output_dir is not None
            else self.context.project_path / constants.DEFAULT_OUTPUT_DIR
        )
        self.manifest: Optional[Dict[str, Any]] = None
        self._validate()

    def _validate(self):
        low, high = constants.TIMEOUT_RANGE
        for fn in self.config.functions:
            if fn.runtime not in constants.RUNTIMES:
                raise PackagingError(
                    f"Function '{fn.name}': unsupported runtime '{fn.runtime}', expected one of {list(constants.RUNTIMES)}."
                )
            if fn.memory not in constants.MEMORY_SIZES:
                raise PackagingError(
                    f"Function '{fn.name}': unsupported memory {fn.memory}, expected one of {list(constants.MEMORY_SIZES)}."
                )
            if not low <= fn.timeout <= high:
                raise PackagingError(
                    f"Function '{fn.name}': timeout {fn.timeout}s is outside {low}-{high}s."
                )

    async def compile(self) -> Dict[str, Any]:
        root = Path(self.config.function_root_path)
        if not root.is_dir():
            raise PackagingError(f"Function root '{root}' does not exist.")
        manifest = self.config.dump()
        manifest["envId"] = self.context.env_id
        manifest["archives"] = {fn.name: f"{fn.name}.zip" for fn in self.config.functions}
        self.manifest = manifest
        logger.debug(f"[LocalFunctionPackager] Compiled manifest: {manifest}")
        return manifest

    async def deploy(self) -> None:
        if self.manifest is None:
            await self.compile()
        await asyncio.to_thread(self._write)

    def _write(self):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for fn in self.config.functions:
            archive = shutil.make_archive(
                str(self.output_dir / fn.name), "zip", root_dir=self.config.function_root_path
            )
            logger.info(f"[LocalFunctionPackager] Packed '{fn.name}' into '{archive}'")
        manifest_path = self.output_dir / constants.FUNCTION_MANIFEST_FILENAME
        manifest_path.write_text(yaml.safe_dump(self.manifest, sort_keys=False), encoding="utf-8")
        logger.info(f"[LocalFunctionPackager] {constants.FUNCTION_MANIFEST_FILENAME} written to '{manifest_path}'")
