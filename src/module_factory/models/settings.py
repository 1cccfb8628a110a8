"""Loader settings model."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from module_factory.constants import DEFAULT_FACTORY_NAME


class FactorySettings(BaseModel):
    """Settings shared by all load operations ([module_factory] table in TOML)."""

    default_factory_name: str | None = Field(
        default=DEFAULT_FACTORY_NAME,
        description="Factory called when neither functionName nor constructorName is given (None disables it)",
    )
    legacy_relative_paths: bool = Field(
        default=False,
        description="Treat any name containing '../' as relative, not only leading './' or '../'",
    )
    base_dir: Path | None = Field(
        default=None,
        description=(
            "Directory that names starting with ./ or ../ are resolved against (default: current working "
            "directory); other relative file paths such as plugins/x.py resolve against the working directory"
        ),
    )
    encoding: str = Field(
        default="utf-8",
        description="Encoding used to read JSON resources",
    )

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {"default_factory_name": "default", "legacy_relative_paths": False},
                {"default_factory_name": None, "base_dir": "/srv/app"},
            ]
        },
    )


__all__ = ["FactorySettings"]
