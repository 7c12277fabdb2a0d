import logging

from ..config import ResolvedInputs
from ..datacls import BuildOutput, FunctionSpec, PackagingConfig
from ..exceptions import EmptyBuildOutputError

logger = logging.getLogger(__name__)


class ArtifactAdapter:
    """Maps the primary build artifact and resolved inputs onto a packaging config."""

    def adapt(self, build_output: BuildOutput, config: ResolvedInputs) -> PackagingConfig:
        # Only the first descriptor is deployed; any others are ignored.
        if not build_output.functions:
            raise EmptyBuildOutputError("Build output contains no function descriptors, nothing to package.")
        primary = build_output.functions[0]
        if len(build_output.functions) > 1:
            logger.warning(
                f"[ArtifactAdapter] Build produced {len(build_output.functions)} functions, "
                f"only '{primary.name}' will be deployed."
            )

        packaging = PackagingConfig(
            function_root_path=primary.source,
            functions=[
                FunctionSpec(
                    name=primary.name,
                    handler=primary.entry,
                    runtime=config.runtime,
                    install_dependency=True,
                    memory=config.memory,
                    timeout=config.timeout,
                    env_variables=dict(config.env_variables),
                )
            ],
            service_paths={config.name: config.path},
        )
        logger.debug(f"[ArtifactAdapter] Packaging configuration: {packaging.dump()}")
        return packaging
