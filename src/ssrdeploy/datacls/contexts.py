"""
SSR Deploy Plugin Context

This module contains the PluginContext data class, which carries the host
services a plugin needs: where the project lives, where to log, and which
environment it deploys to.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PluginContext(BaseModel):
    """
    Holds the injected, immutable host services for a lifecycle run.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    project_path: Path = Field(default_factory=Path.cwd)
    logger: logging.Logger = Field(default_factory=lambda: logging.getLogger("ssrdeploy.plugin"))
    env_id: Optional[str] = None
    output_dir: Optional[Path] = None