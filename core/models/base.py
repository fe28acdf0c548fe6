# =============================================================================
# core/models/base.py - Backend Row Base Model
# =============================================================================
# Columns in the backend tables are nullable even where the client has a
# sensible default ("" for text, 0 for counters). BackendRow drops NULL
# values before validation so the field default applies instead.
# =============================================================================

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class BackendRow(BaseModel):
    """Base for models parsed from table rows; unknown columns are ignored."""
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
