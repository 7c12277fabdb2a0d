"""
CI pipeline rendering.

The pipeline fetches the project source (archive URL or git reference) into a
fixed workspace, logs in with short-lived credentials, runs the lifecycle with
CI=true, and always logs out at the end. It is rendered as data; running it is
the CI system's job.
"""

import logging
import shlex
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from . import constants
from .exceptions import ConfigValidationError

logger = logging.getLogger(__name__)


class PipelineSpec(BaseModel):
    """
        Class Config-Validation Model describe a deployment pipeline
    """
    model_config = ConfigDict(extra="forbid")

    env_id: str
    archive_url: Optional[str] = None
    repository: Optional[str] = None
    ref: str = "master"
    workspace: str = constants.PIPELINE_WORKSPACE
    config_file: str = constants.DEFAULT_CONFIG_FILENAME
    stages: List[constants.Stage] = Field(default_factory=lambda: list(constants.DEFAULT_STAGES))
    image: str = "node:12"
    login_command: str = (
        f'tcb login --apiKeyId "${constants.PIPELINE_SECRET_ID}" '
        f'--apiKey "${constants.PIPELINE_SECRET_KEY}"'
    )
    logout_command: str = "tcb logout"

    @model_validator(mode='after')
    def check_single_source(self) -> 'PipelineSpec':
        """Exactly one of archive_url / repository"""
        if bool(self.archive_url) == bool(self.repository):
            raise ValueError("Exactly one of 'archive_url' or 'repository' must be given.")
        return self


def build_spec(**kwargs) -> PipelineSpec:
    try:
        return PipelineSpec.model_validate(kwargs)
    except ValidationError as e:
        raise ConfigValidationError(f"Pipeline specification is invalid:\n{e}")


def _fetch_command(spec: PipelineSpec) -> str:
    workspace = shlex.quote(spec.workspace)
    if spec.archive_url:
        archive = shlex.quote(f"/tmp/{constants.PIPELINE_ARCHIVE_NAME}")
        return (
            f"mkdir -p {workspace} && "
            f"curl -fsSL {shlex.quote(spec.archive_url)} -o {archive} && "
            f"unzip -q -o {archive} -d {workspace}"
        )
    return (
        f"git clone --depth 1 --branch {shlex.quote(spec.ref)} "
        f"{shlex.quote(spec.repository)} {workspace}"
    )


def render_pipeline(spec: PipelineSpec) -> Dict[str, Any]:
    """Render the pipeline as a plain dictionary of ordered steps."""
    stages = " ".join(stage.value for stage in spec.stages)
    run_command = (
        f"ssrdeploy run {shlex.quote(spec.config_file)} {stages} "
        f"--env-id {shlex.quote(spec.env_id)}"
    )
    pipeline = {
        "name": f"ssrdeploy-{spec.env_id}",
        "image": spec.image,
        "steps": [
            {"name": "fetch", "run": _fetch_command(spec)},
            {"name": "login", "run": spec.login_command, "workdir": spec.workspace},
            {
                "name": "deploy",
                "run": run_command,
                "workdir": spec.workspace,
                "env": {"CI": "true", constants.ENV_ID_ENV: spec.env_id},
            },
            {"name": "logout", "run": spec.logout_command, "workdir": spec.workspace, "if": "always()"},
        ],
    }
    logger.debug(f"[Pipeline] Rendered {len(pipeline['steps'])} steps for env '{spec.env_id}'")
    return pipeline


def dump_pipeline(spec: PipelineSpec) -> str:
    return yaml.safe_dump(render_pipeline(spec), default_flow_style=False, sort_keys=False)
