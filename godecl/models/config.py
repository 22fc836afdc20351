"""
Configuration models for godecl.

ParseOptions selects which declaration categories are collected;
GodeclSettings carries process-wide settings from the environment.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParseOptions(BaseModel):
    """Named toggles for a single parse call"""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid"
    )

    ignore_comments: bool = False
    ignore_structs: bool = False
    ignore_interfaces: bool = False
    ignore_functions: bool = False
    ignore_methods: bool = False
    ignore_types: bool = False
    ignore_variables: bool = False
    ignore_constants: bool = False
    allow_any_import_alias: bool = False

    def with_overrides(self, **overrides: bool) -> "ParseOptions":
        """Return a copy with the given (snake_case) flags replaced"""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return ParseOptions(**data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GodeclSettings(BaseSettings):
    """Global settings with environment variable support"""
    model_config = SettingsConfigDict(
        env_prefix="GODECL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    max_workers: int = Field(default=4, ge=1, le=64)
    package_path: str = ""
