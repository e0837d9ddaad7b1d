"""
PolicyConfig — the operator's restart policy.

Loaded once per run from the YAML config file, merged with the built-in
defaults (see ``restartmonkey.core.config.defaults``) and never mutated
afterwards.

OS-scoped maps are keyed by OS level: ``"CentOS.7"``, ``"CentOS"`` or
``"default"``.  Lookups walk the levels most-specific first.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

DEFAULT_LEVEL = "default"


class PolicyConfig(BaseModel):
    """Restart policy: service lists plus OS-scoped overrides."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    # ── Flat service lists ───────────────────────────────────────
    whitelist: list[str] = Field(default_factory=list)
    ignore: list[str] = Field(default_factory=list)

    # ── OS-scoped service lists ──────────────────────────────────
    blacklist: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("blacklist", "blacklisted"),
    )
    must_reboot: dict[str, list[str]] = Field(default_factory=dict)

    # ── OS-scoped overrides ──────────────────────────────────────
    bin_to_service: dict[str, dict[str, str]] = Field(default_factory=dict)
    restart_cmd: dict[str, dict[str, str]] = Field(default_factory=dict)
    status_cmd: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("whitelist", "ignore", mode="before")
    @classmethod
    def _none_is_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("blacklist", "must_reboot", mode="before")
    @classmethod
    def _scope_plain_lists(cls, value: Any) -> Any:
        # A bare list applies on every OS
        if value is None:
            return {}
        if isinstance(value, (list, tuple, set)):
            return {DEFAULT_LEVEL: list(value)}
        if isinstance(value, dict):
            return {k: ([] if v is None else v) for k, v in value.items()}
        return value

    @field_validator("bin_to_service", "restart_cmd", "status_cmd", mode="before")
    @classmethod
    def _none_is_empty_map(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {k: ({} if v is None else v) for k, v in value.items()}
        return value
