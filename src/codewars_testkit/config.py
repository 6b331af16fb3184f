from pydantic import BaseModel, Field
from typing import Optional
import yaml, pathlib

class OutputConfig(BaseModel):
    path: Optional[str] = Field(None, description="Write the event stream to this file instead of stdout")

class RunnerConfig(BaseModel):
    capture_output: bool = Field(True, description="Capture what tests print and emit it before their result")
    convert_warnings: bool = Field(True, description="Report warnings raised during a test as errors")

class AppConfig(BaseModel):
    log_level: str = Field("WARNING")
    output: OutputConfig = Field(default_factory=OutputConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)

def load_config(path: Optional[str] = None) -> AppConfig:
    if path is None:
        return AppConfig()
    data = yaml.safe_load(pathlib.Path(path).read_text()) or {}
    return AppConfig.model_validate(data)
