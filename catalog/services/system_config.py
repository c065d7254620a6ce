"""
System configuration service.

Read-through access to the system_configuration table. Nothing is cached;
every read queries the current value, and a change is seen by the next
request on any instance.
"""

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.config import BOOLEAN_CONFIG_KEYS, ConfigKey
from catalog.core.errors import ValidationError
from catalog.core.logging import get_logger
from catalog.core.permissions import require_superadmin_role
from catalog.models.system_config import SystemConfiguration
from catalog.models.user import Users, utcnow

logger = get_logger(__name__)


def _parse_key(key: str) -> ConfigKey:
    try:
        return ConfigKey(key)
    except ValueError:
        raise ValidationError(f"Unknown configuration key: {key}") from None


def decode_value(raw: str) -> Any:
    """Decode a stored value; anything that is not valid JSON is returned as text."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


async def get_config_entry(db: AsyncSession, key: str) -> SystemConfiguration | None:
    result = await db.execute(
        select(SystemConfiguration).where(SystemConfiguration.key == key)  # type: ignore[arg-type]
    )
    return result.scalar_one_or_none()


async def get_config_value(db: AsyncSession, key: str) -> Any | None:
    """Current decoded value of ``key``, or None when it was never set."""
    entry = await get_config_entry(db, key)
    if entry is None:
        return None
    return decode_value(entry.value)


async def get_flag(db: AsyncSession, key: ConfigKey) -> bool:
    """
    Read a boolean flag.

    Absent, malformed or non-boolean values all read as False.
    """
    return await get_config_value(db, key.value) is True


async def show_pending_figures(db: AsyncSession) -> bool:
    """Current SHOW_PENDING_FIGURES value (False unless explicitly set to true)."""
    return await get_flag(db, ConfigKey.SHOW_PENDING_FIGURES)


async def list_config_entries(db: AsyncSession) -> list[SystemConfiguration]:
    result = await db.execute(select(SystemConfiguration).order_by(SystemConfiguration.key))  # type: ignore[arg-type]
    return list(result.scalars().all())


async def set_config_value(
    db: AsyncSession, actor: Users | None, key: str, value: Any
) -> SystemConfiguration:
    """
    Create or overwrite a configuration value.

    Raises:
        UnauthenticatedError: anonymous actor
        ForbiddenError: actor is not a SUPERADMIN
        ValidationError: unknown key, or a non-boolean value for a boolean key
    """
    actor = require_superadmin_role(actor)
    config_key = _parse_key(key)

    if config_key in BOOLEAN_CONFIG_KEYS and not isinstance(value, bool):
        raise ValidationError(f"{config_key.value} must be a boolean")

    entry = await get_config_entry(db, config_key.value)
    encoded = json.dumps(value)
    if entry is None:
        entry = SystemConfiguration(key=config_key.value, value=encoded)
        db.add(entry)
    else:
        entry.value = encoded
    entry.updated_at = utcnow()
    entry.updated_by_id = actor.user_id
    await db.flush()

    logger.info("system_config_updated", key=config_key, value=value, by=actor.user_id)
    return entry
