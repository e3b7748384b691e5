"""
Single-use step-up grants.

An authorized ``edit`` does not change anything by itself: it issues a grant
that the follow-up update request must present. A grant is bound to the user,
the entity type, the record and the action, carries the reason captured by
the gate, and expires after STEP_UP_GRANT_TTL seconds.
"""
import logging
import secrets
from dataclasses import asdict, dataclass

from django.core.cache import cache
from django.utils import timezone

from common.utils import get_app_setting
from core.exceptions import PermissionDeniedError

logger = logging.getLogger('stepup')

CACHE_KEY = 'stepup:grant:{token}'


@dataclass(frozen=True)
class StepUpGrant:
    token: str
    user_id: str
    entity_type: str
    record_id: str
    action: str
    reason: str
    issued_at: str

    def as_dict(self):
        return asdict(self)


def issue_grant(user, entity_type, record_id, action, reason) -> StepUpGrant:
    grant = StepUpGrant(
        token=secrets.token_urlsafe(32),
        user_id=str(user.pk),
        entity_type=entity_type,
        record_id=str(record_id),
        action=action,
        reason=reason,
        issued_at=timezone.now().isoformat(),
    )
    cache.set(CACHE_KEY.format(token=grant.token), grant.as_dict(), get_app_setting('STEP_UP_GRANT_TTL'))
    logger.info(f"Step-up grant issued | Context: user_id={grant.user_id} "
                f"entity={entity_type} record_id={grant.record_id} action={action}")
    return grant


def consume_grant(token, user, entity_type, record_id, action) -> StepUpGrant:
    """
    Redeem a grant for exactly this user, record and action.

    The grant is removed once redeemed, so a token works only once.

    Raises:
        PermissionDeniedError: missing, expired, already used or issued for
            something else
    """
    if not token:
        raise PermissionDeniedError(
            message="This change requires step-up confirmation",
            code="STEP_UP_REQUIRED"
        )

    key = CACHE_KEY.format(token=token)
    stored = cache.get(key)
    if stored is None:
        raise PermissionDeniedError(
            message="Step-up confirmation expired or was already used",
            code="STEP_UP_GRANT_INVALID"
        )

    grant = StepUpGrant(**stored)
    expected = (str(user.pk), entity_type, str(record_id), action)
    if (grant.user_id, grant.entity_type, grant.record_id, grant.action) != expected:
        logger.warning(f"Step-up grant presented for another target | Context: user_id={user.pk} "
                       f"entity={entity_type} record_id={record_id} action={action}")
        raise PermissionDeniedError(
            message="Step-up confirmation was issued for a different record",
            code="STEP_UP_GRANT_MISMATCH",
            details={'entity_type': entity_type, 'record_id': str(record_id)}
        )

    cache.delete(key)
    return grant
