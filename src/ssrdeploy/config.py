import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Mapping, Optional, Union
from pydantic import BaseModel, Field, ValidationError, ConfigDict, StrictFloat, StrictInt, field_validator

from . import constants
from .exceptions import (
    ConfigParsingError,
    ConfigFileMissingError,
    ConfigValidationError,
    UnknownInputError,
)


logger = logging.getLogger(__name__)


class ResolvedInputs(BaseModel):
    """
        Class Config-Validation Model describe fully resolved plugin `inputs`

    Every field is always present once resolved. Ranges (runtime, memory,
    timeout) are deliberately not checked here; the packager rejects them.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    entry: str
    path: str
    name: str
    install_command: str = Field(alias="installCommand")
    build_command: str = Field(alias="buildCommand")
    runtime: str
    memory: StrictInt
    timeout: Union[StrictInt, StrictFloat]
    env_variables: Dict[str, str] = Field(alias="envVariables")

    @field_validator("install_command", "build_command", mode="before")
    @classmethod
    def empty_command(cls, value: Any) -> Any:
        """A null command means 'skip this step'."""
        return "" if value is None else value

    def to_inputs(self) -> Dict[str, Any]:
        """Dump back to caller-facing camelCase keys."""
        return self.model_dump(by_alias=True)


# caller key (alias or field name) -> canonical alias
_INPUT_KEYS: Dict[str, str] = {}
for _field_name, _field in ResolvedInputs.model_fields.items():
    _alias = _field.alias or _field_name
    _INPUT_KEYS[_field_name] = _alias
    _INPUT_KEYS[_alias] = _alias


def _canonical(data: Mapping[str, Any], source: str) -> Dict[str, Any]:
    unknown = sorted(str(key) for key in data if key not in _INPUT_KEYS)
    if unknown:
        raise UnknownInputError(
            f"Unknown {source} key(s): {', '.join(unknown)}. "
            f"Allowed keys: {', '.join(sorted(set(_INPUT_KEYS.values())))}."
        )
    canonical: Dict[str, Any] = {}
    for key, value in data.items():
        alias = _INPUT_KEYS[key]
        if alias in canonical:
            raise ConfigValidationError(f"Input '{alias}' is given more than once (camelCase and snake_case).")
        canonical[alias] = value
    return canonical


def resolve_inputs(
    raw: Union[Mapping[str, Any], ResolvedInputs, None] = None,
    defaults: Mapping[str, Any] = constants.DEFAULT_INPUTS,
) -> ResolvedInputs:
    """
    Shallow-merge caller inputs over defaults.

    Keys present in `raw` win, absent keys take the default. Nested values
    (envVariables) are replaced wholesale, never merged.

    Args:
        raw: caller inputs, camelCase or snake_case keys; may already be resolved
        defaults: the defaults table, one entry per field

    Returns:
        The resolved, immutable inputs record
    """
    if isinstance(raw, ResolvedInputs):
        raw = raw.to_inputs()
    if raw is not None and not isinstance(raw, Mapping):
        raise ConfigValidationError(f"Plugin inputs must be a mapping, got {type(raw).__name__}.")

    merged = _canonical(defaults, "default")
    merged.update(_canonical(raw or {}, "input"))

    try:
        resolved = ResolvedInputs.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(f"Plugin inputs validation failed:\n{e}")
    logger.debug(f"Resolved inputs: {resolved.to_inputs()}")
    return resolved


class CollaboratorsModel(BaseModel):
    """
        Class Config-Validation Model describe `collaborators`
    """
    model_config = ConfigDict(extra="forbid")

    builder: str = constants.DEFAULT_BUILDER
    packager: str = constants.DEFAULT_PACKAGER


class ProjectModel(BaseModel):
    """
        Class Config-Validation Model describe top-level of config
    """
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    env_id: Optional[str] = Field(None, alias="envId")
    inputs: Dict[str, Any] = Field(default_factory=dict)
    collaborators: CollaboratorsModel = Field(default_factory=CollaboratorsModel)
    output: str = constants.DEFAULT_OUTPUT_DIR

    @field_validator("inputs", mode="before")
    @classmethod
    def null_inputs(cls, value: Any) -> Any:
        return {} if value is None else value


class Config:
    """
    Loads and validates the project file using Pydantic models.
    It is the sole gatekeeper for configuration.
    """
    def __init__(self, config_path: Union[str, Path]):
        self.path = Path(config_path)
        logger.info(f"Loading configuration from '{self.path}'...")
        raw_data = self._load_raw_config()

        logger.info("Validating configuration structure with Pydantic...")
        try:
            self.model = ProjectModel.model_validate(raw_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Configuration validation failed:\n{e}")
        self.inputs = resolve_inputs(self.model.inputs)
        logger.debug(f"Configuration model validated successfully: \n{self.model.model_dump_json(indent=2)}")
        logger.info("Configuration validation passed.")

    def _load_raw_config(self) -> Dict[str, Any]:
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigFileMissingError(f"Configuration file not found at: {self.path}")
        try:
            config_data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParsingError(f"Error parsing YAML file: {e}")
        if config_data is None:
            config_data = {}
        if not isinstance(config_data, dict):
            raise ConfigParsingError("Configuration file must be a YAML document containing a dictionary.")
        logger.debug(f"Successfully parsed YAML from '{self.path}'.")
        return config_data

    @property
    def env_id(self) -> Optional[str]:
        return self.model.env_id

    @property
    def builder(self) -> str:
        return self.model.collaborators.builder

    @property
    def packager(self) -> str:
        return self.model.collaborators.packager

    @property
    def output(self) -> str:
        return self.model.output
