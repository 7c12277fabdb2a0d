from typing import Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field


class FunctionSpec(BaseModel):
    """
        Class represents a single function entry of the packaging contract.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    handler: str
    runtime: str
    install_dependency: bool = Field(True, alias="installDependency")
    memory: int
    timeout: Union[int, float]
    env_variables: Dict[str, str] = Field(default_factory=dict, alias="envVariables")


class PackagingConfig(BaseModel):
    """
        Class represents the input the function packager is constructed with.

    `dump()` yields the camelCase shape packagers expect, e.g.
    {"functionRootPath": ..., "functions": [...], "servicePaths": {name: path}}.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    function_root_path: str = Field(alias="functionRootPath")
    functions: List[FunctionSpec]
    service_paths: Dict[str, str] = Field(alias="servicePaths")

    def dump(self) -> Dict:
        return self.model_dump(by_alias=True)
