"""
System configuration API endpoints.

Reading is public (clients need SHOW_PENDING_FIGURES to label listings);
writing requires SUPERADMIN.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import ConfigKey
from catalog.core.auth import SuperAdminUser
from catalog.core.database import get_db
from catalog.core.errors import NotFoundError
from catalog.schemas.system_config import (
    SystemConfigListResponse,
    SystemConfigResponse,
    SystemConfigUpdate,
)
from catalog.services import system_config

router = APIRouter(prefix="/admin/system-config", tags=["system-config"])


@router.get("/", response_model=SystemConfigListResponse)
async def list_config(db: Annotated[AsyncSession, Depends(get_db)]) -> SystemConfigListResponse:
    """All stored configuration entries with decoded values."""
    entries = await system_config.list_config_entries(db)
    return SystemConfigListResponse(
        configs=[
            SystemConfigResponse(
                key=entry.key,
                value=system_config.decode_value(entry.value),
                updated_at=entry.updated_at,
            )
            for entry in entries
        ]
    )


@router.get("/{key}", response_model=SystemConfigResponse)
async def get_config(
    key: Annotated[str, Path(description="Configuration key")],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SystemConfigResponse:
    """
    One configuration entry.

    A known key that was never set returns ``value: null``; an unknown key is 404.
    """
    if key not in {k.value for k in ConfigKey}:
        raise NotFoundError(f"Unknown configuration key: {key}")

    entry = await system_config.get_config_entry(db, key)
    if entry is None:
        return SystemConfigResponse(key=key)
    return SystemConfigResponse(
        key=entry.key,
        value=system_config.decode_value(entry.value),
        updated_at=entry.updated_at,
    )


@router.put("/{key}", response_model=SystemConfigResponse)
async def set_config(
    key: Annotated[str, Path(description="Configuration key")],
    payload: SystemConfigUpdate,
    current_user: SuperAdminUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SystemConfigResponse:
    """Create or overwrite a configuration value (SUPERADMIN only)."""
    entry = await system_config.set_config_value(db, current_user, key, payload.value)
    await db.commit()
    return SystemConfigResponse(
        key=entry.key,
        value=system_config.decode_value(entry.value),
        updated_at=entry.updated_at,
    )
