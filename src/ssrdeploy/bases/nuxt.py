import asyncio
import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List

from .. import constants
from ..datacls import BuildOutput, FunctionDescriptor
from ..exceptions import SSRBuildError

logger = logging.getLogger(__name__)

HANDLER_DEPENDENCIES = {"serverless-http": "^2.5.0"}

HANDLER_TEMPLATE = """\
const {{ Nuxt }} = require('nuxt');
const serverless = require('serverless-http');
const config = require('./nuxt.config.js');

let handler;

exports.main = async (event, context) => {{
  if (!handler) {{
    const nuxt = new Nuxt({{
      ...config,
      dev: false,
      router: {{ ...(config.router || {{}}), base: {base} }},
    }});
    await nuxt.ready();
    handler = serverless(nuxt.render);
  }}
  return handler(event, context);
}};
"""


class NuxtBuilder:
    """
    Turns a built Nuxt project into a serverless-function directory.

    The project's build output is copied into a temporary directory together
    with a generated `index.js` handler. `clean()` removes every directory
    this builder created.
    """

    def __init__(self, project_path: Path = Path(".")):
        self.project_path = Path(project_path)
        self._workdirs: List[Path] = []

    async def build(self, entry: str, options: Dict[str, str]) -> BuildOutput:
        return await asyncio.to_thread(self._build, entry, options)

    async def clean(self) -> None:
        await asyncio.to_thread(self._clean)

    def _build(self, entry: str, options: Dict[str, str]) -> BuildOutput:
        name = options["name"]
        source = (self.project_path / entry).resolve()
        logger.debug(f"[NuxtBuilder] Building function '{name}' from '{source}'")
        if not source.is_dir():
            raise SSRBuildError(f"Nuxt entry directory '{source}' does not exist.")
        if not (source / ".nuxt").is_dir():
            raise SSRBuildError(f"No '.nuxt' build output in '{source}'; run the build command first.")

        workdir = Path(tempfile.mkdtemp(prefix=constants.TEMP_PREFIX))
        self._workdirs.append(workdir)
        function_dir = workdir / name
        function_dir.mkdir()

        for item in constants.NUXT_ARTIFACTS:
            src = source / item
            if src.is_dir():
                shutil.copytree(src, function_dir / item)
            elif src.is_file():
                shutil.copy2(src, function_dir / item)
            else:
                logger.debug(f"[NuxtBuilder] '{item}' not found in '{source}', skipped.")

        self._write_handler(function_dir, options.get("path", "/"))
        self._write_manifest(function_dir, name)
        logger.info(f"[NuxtBuilder] Function '{name}' prepared at '{function_dir}'")

        return BuildOutput(functions=[
            FunctionDescriptor(source=str(function_dir), entry=constants.HANDLER_ENTRY, name=name)
        ])

    @staticmethod
    def _write_handler(function_dir: Path, base: str):
        content = HANDLER_TEMPLATE.format(base=json.dumps(base.rstrip("/") + "/"))
        (function_dir / constants.HANDLER_FILENAME).write_text(content, encoding="utf-8")

    @staticmethod
    def _write_manifest(function_dir: Path, name: str):
        manifest_path = function_dir / constants.MANIFEST_FILENAME
        if manifest_path.is_file():
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
        else:
            manifest = {"name": name, "private": True}
        # the handler's own runtime dependency
        dependencies = manifest.setdefault("dependencies", {})
        for dep, version in HANDLER_DEPENDENCIES.items():
            dependencies.setdefault(dep, version)
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")

    def _clean(self):
        while self._workdirs:
            workdir = self._workdirs.pop()
            logger.debug(f"[NuxtBuilder] Removing '{workdir}'")
            shutil.rmtree(workdir, ignore_errors=True)
