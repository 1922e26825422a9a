import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CoverageOptions(BaseModel):
    """Engine options controlling where and whether coverage reports are written."""

    model_config = ConfigDict(extra="forbid")

    output_format: Literal["html", "none"] = Field(
        "none", description="Format of the report files; 'none' writes nothing"
    )
    output_path: str = Field(
        default_factory=os.getcwd, description="Directory receiving coverage.json and coverage_output.html"
    )
    debug: bool = Field(False, description="Emit this model's matching decisions as DEBUG records; handlers and levels stay with the host")


class ApiOptions(BaseModel):
    """Per-contract registration options."""

    model_config = ConfigDict(extra="forbid")

    path_prefix: str = Field(
        "", description="Prefix prepended to every declared path before matching, e.g. a server base path"
    )


class ReportOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    show_zero_counts: bool = Field(False, description="Include declared triples that were never hit")
