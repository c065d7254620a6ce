"""
Pydantic schemas for system configuration endpoints
"""

from typing import Any

from pydantic import BaseModel

from catalog.schemas.common import UTCDatetimeOptional


class SystemConfigResponse(BaseModel):
    """One configuration entry with its decoded value"""

    key: str
    value: Any = None
    updated_at: UTCDatetimeOptional = None


class SystemConfigListResponse(BaseModel):
    """All stored configuration entries"""

    configs: list[SystemConfigResponse]


class SystemConfigUpdate(BaseModel):
    """New value for a configuration key"""

    value: Any
