"""Runtime settings for cadsync, read from the environment."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from cadsync.domain.errors import ValidationError, invalid_setting

DEFAULT_PREVIEW_LIMIT = 10
DEFAULT_FEE_CATEGORY = "impuesto predial"
DEFAULT_LOG_LEVEL = "WARNING"


class ExistenceCheckPolicy(str, Enum):
    """What to do when the cadastral registry cannot be reached.

    PERMISSIVE treats every account as registered and logs a warning, so a
    registry outage does not block ledger synchronization. STRICT aborts the
    run instead.
    """

    PERMISSIVE = "permissive"
    STRICT = "strict"


@dataclass(frozen=True)
class SyncSettings:
    """Tunable behavior of the synchronization engine."""

    existence_policy: ExistenceCheckPolicy = ExistenceCheckPolicy.PERMISSIVE
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    fee_category: str = DEFAULT_FEE_CATEGORY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SyncSettings":
        """Build settings from CADSYNC_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValidationError: If a variable holds an unusable value
        """
        env = os.environ if environ is None else environ

        policy_value = env.get("CADSYNC_EXISTENCE_POLICY", ExistenceCheckPolicy.PERMISSIVE.value)
        try:
            policy = ExistenceCheckPolicy(policy_value.strip().lower())
        except ValueError:
            raise ValidationError(
                invalid_setting("CADSYNC_EXISTENCE_POLICY", policy_value, "'permissive' or 'strict'")
            )

        limit_value = env.get("CADSYNC_PREVIEW_LIMIT", str(DEFAULT_PREVIEW_LIMIT))
        try:
            preview_limit = int(limit_value)
        except ValueError:
            preview_limit = -1
        if preview_limit < 0:
            raise ValidationError(
                invalid_setting("CADSYNC_PREVIEW_LIMIT", limit_value, "a non-negative integer")
            )

        fee_category = env.get("CADSYNC_FEE_CATEGORY", DEFAULT_FEE_CATEGORY).strip()
        if not fee_category:
            raise ValidationError(invalid_setting("CADSYNC_FEE_CATEGORY", fee_category, "a fee name fragment"))

        return cls(
            existence_policy=policy,
            preview_limit=preview_limit,
            fee_category=fee_category,
            log_level=env.get("CADSYNC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper(),
        )
