"""Issues reported while discovering and constructing adapters."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field

from .base import SchemaBase, Severity


class IssueCode(str, Enum):
    # discovery time
    PLUGIN_NOT_FOUND = "plugin_not_found"
    PLUGIN_DISABLED = "plugin_disabled"
    METADATA_MISSING = "metadata_missing"
    METADATA_CORRUPTED = "metadata_corrupted"
    ADAPTER_CONFLICT = "adapter_conflict"
    # construction time
    PLUGIN_LOAD_FAILED = "plugin_load_failed"
    FACTORY_MISSING = "factory_missing"
    INSTANTIATION_FAILED = "instantiation_failed"


class RegistryIssue(SchemaBase):
    code: IssueCode
    message: str
    severity: Severity = Field(default=Severity.ERROR)
    adapter_type: Optional[str] = Field(default=None)
    key: Optional[str] = Field(default=None)
