import logging
from contextlib import asynccontextmanager
from typing import Any, Iterable, Mapping, Optional, Union

from . import constants
from .constants import Stage, LifecycleState
from .config import Config, ResolvedInputs, resolve_inputs
from .builder import DependencyInstaller, BuildExecutor, ArtifactAdapter, DeploymentCoordinator
from .datacls import BuildOutput, PackagingConfig, PluginContext
from .exceptions import PreconditionError, StageOrderError
from .process import CommandRunner, run_command
from .protocols import FunctionPackagerProtocol, PackagerFactoryProtocol, SSRBuilderProtocol
from .utils import load_object

logger = logging.getLogger(__name__)


class NuxtPlugin:
    """
    Lifecycle driver deploying an SSR (Nuxt) project as a routed function.

    The host calls `init`, `build`, `compile`, `deploy` and `remove` one at a
    time and in that order. Each stage checks the current state first and
    raises StageOrderError without doing any work when called out of order.
    A stage that raises moves the plugin to FAILED; the error propagates as is.

    Instances hold mutable stage-to-stage state and are not safe to drive
    concurrently.
    """

    def __init__(
        self,
        inputs: Union[Mapping[str, Any], ResolvedInputs, None],
        ssr_builder: SSRBuilderProtocol,
        packager_factory: PackagerFactoryProtocol,
        context: Optional[PluginContext] = None,
        runner: CommandRunner = run_command,
        name: str = "NuxtPlugin",
    ):
        self.name = name
        self.context = context or PluginContext()
        self.log = self.context.logger
        self.resolved_inputs = resolve_inputs(inputs)

        self.ssr_builder = ssr_builder
        self.packager_factory = packager_factory
        self.installer = DependencyInstaller(self.context.project_path, runner)
        self.executor = BuildExecutor(ssr_builder, self.context.project_path, runner)
        self.adapter = ArtifactAdapter()
        self.coordinator = DeploymentCoordinator(ssr_builder)

        self.state = LifecycleState.CREATED
        self.build_output: Optional[BuildOutput] = None
        self.packaging_config: Optional[PackagingConfig] = None
        self.function_packager: Optional[FunctionPackagerProtocol] = None
        self.artifact: Any = None

    # --- state machine ---

    def can_run(self, stage: Stage) -> bool:
        required, _ = constants.STAGE_TRANSITIONS[stage]
        if self.state in constants.TERMINAL_STATES:
            return False
        return required is None or self.state == required

    @asynccontextmanager
    async def _stage(self, stage: Stage):
        if not self.can_run(stage):
            required, _ = constants.STAGE_TRANSITIONS[stage]
            raise StageOrderError(stage.value, self.state.value, required.value if required else None)

        self.log.debug(f"{self.name}: {stage.value} {self.resolved_inputs.to_inputs()}")
        try:
            yield
        except BaseException as e:
            self.state = LifecycleState.FAILED
            self.log.error(
                f"{self.name}: stage '{stage.value}' failed: {e!r}; "
                f"inputs: {self.resolved_inputs.to_inputs()}"
            )
            raise
        _, self.state = constants.STAGE_TRANSITIONS[stage]
        self.log.debug(f"{self.name}: {stage.value} done, state is now '{self.state.value}'")

    def _require_packager(self, stage: Stage) -> FunctionPackagerProtocol:
        if self.function_packager is None:
            raise PreconditionError(f"Stage '{stage.value}' needs a packager, but 'build' has not produced one.")
        return self.function_packager

    # --- lifecycle stages ---

    async def init(self) -> None:
        """Install project dependencies if the project has a manifest."""
        async with self._stage(Stage.INIT):
            await self.installer.maybe_install(self.resolved_inputs.install_command, stage=Stage.INIT.value)

    async def build(self) -> None:
        """Build the project and prepare the function packager."""
        async with self._stage(Stage.BUILD):
            self.build_output = await self.executor.build(self.resolved_inputs, stage=Stage.BUILD.value)
            self.packaging_config = self.adapter.adapt(self.build_output, self.resolved_inputs)
            self.function_packager = self.packager_factory(self.packaging_config, self.context)

    async def compile(self) -> Any:
        """Delegate compilation to the function packager."""
        async with self._stage(Stage.COMPILE):
            self.artifact = await self._require_packager(Stage.COMPILE).compile()
        return self.artifact

    async def deploy(self) -> None:
        async with self._stage(Stage.DEPLOY):
            self.log.debug(f"{self.name}: deploy build output {self.build_output}")
            await self.coordinator.deploy(self._require_packager(Stage.DEPLOY), name=self.resolved_inputs.name)

    async def remove(self) -> None:
        # Resource removal is not implemented; the stage only closes the lifecycle.
        async with self._stage(Stage.REMOVE):
            pass

    async def run(self, stages: Iterable[Union[Stage, str]] = constants.DEFAULT_STAGES) -> Any:
        """Run `stages` in the given order, stopping at the first failure."""
        for stage in stages:
            stage = Stage(stage)
            self.log.info(f"{self.name}: running stage '{stage.value}'")
            await getattr(self, stage.value)()
        return self.artifact


def create_plugin(config: Config, context: PluginContext, runner: CommandRunner = run_command) -> NuxtPlugin:
    """Build a NuxtPlugin whose collaborators are loaded from the config's dotted paths."""
    builder_cls = load_object(config.builder)
    packager_factory = load_object(config.packager)
    logger.debug(f"Using builder '{config.builder}' and packager '{config.packager}'")
    return NuxtPlugin(
        config.inputs,
        ssr_builder=builder_cls(project_path=context.project_path),
        packager_factory=packager_factory,
        context=context,
        runner=runner,
    )
