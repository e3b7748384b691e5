"""
User collaborators used by the audit core.

- credential verification (step-up re-authentication)
- batch identity resolution (actor id -> display name)
- role checks
"""
from typing import Dict, Iterable
from django.contrib.auth import authenticate
from core.exceptions import AuthError
from core.services import BaseService
from .models import User


def has_role(user, roles) -> bool:
    """True for signed-in users holding one of ``roles``; Django superusers always pass"""
    if not (user and user.is_authenticated):
        return False
    return user.is_superuser or getattr(user, 'role', None) in roles


class CredentialVerifier(BaseService):
    """
    Verifies a user's own password through Django's authentication backends.

    Only ever checks the identity passed in; callers pass the acting user.
    """

    def verify(self, user, secret: str, request=None) -> None:
        """
        Raise AuthError unless ``secret`` is the current password of ``user``.
        """
        authenticated = authenticate(request, username=user.get_username(), password=secret)
        if authenticated is None or authenticated.pk != user.pk:
            self.log_warning("Step-up verification failed", user_id=user.pk)
            raise AuthError(
                message="Incorrect password",
                details={"user_id": str(user.pk)}
            )
        self.log_info("Step-up verification succeeded", user_id=user.pk)


def resolve_display_names(user_ids: Iterable) -> Dict[str, str]:
    """
    Batch lookup of display names keyed by user id (as string).

    Ids that are not numeric or have no matching user are simply absent
    from the result.
    """
    numeric_ids = set()
    for raw in user_ids:
        if raw is None:
            continue
        try:
            numeric_ids.add(int(raw))
        except (TypeError, ValueError):
            continue

    if not numeric_ids:
        return {}

    users = User.objects.filter(pk__in=numeric_ids).only(
        'id', 'username', 'email', 'first_name', 'last_name', 'full_name'
    )
    return {str(user.pk): user.display_name for user in users}
