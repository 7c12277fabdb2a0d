from typing import List
from pydantic import BaseModel, ConfigDict


class FunctionDescriptor(BaseModel):
    """
        Class represents one serverless-function unit produced by the SSR builder.
    """
    model_config = ConfigDict(frozen=True)

    source: str
    entry: str
    name: str


class BuildOutput(BaseModel):
    """
        Class represents the output of an SSR build, in the builder's order.
    """
    model_config = ConfigDict(frozen=True)

    functions: List[FunctionDescriptor]
