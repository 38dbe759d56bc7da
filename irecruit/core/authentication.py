from django.conf import settings
from django.utils.translation import gettext as _
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed


class IdentityPrincipal:
    """
    Caller identity as asserted by the API gateway. Tokens are issued and
    validated by the identity service; this service only trusts the
    forwarded account reference and role.
    """
    is_authenticated = True
    is_anonymous = False

    def __init__(self, account_id, role=None):
        self.account_id = account_id
        self.role = (role or '').upper()

    @property
    def pk(self):
        return self.account_id

    def __str__(self):
        return '{} ({})'.format(self.account_id, self.role or 'no role')


class GatewayIdentityAuthentication(BaseAuthentication):
    def authenticate(self, request):
        account_id = request.META.get(settings.IDENTITY_ACCOUNT_HEADER)
        if not account_id:
            return None
        account_id = account_id.strip()
        if not account_id:
            raise AuthenticationFailed(_('Account reference header is empty.'))
        role = request.META.get(settings.IDENTITY_ROLE_HEADER)
        return IdentityPrincipal(account_id, role), None

    def authenticate_header(self, request):
        return 'Gateway'
