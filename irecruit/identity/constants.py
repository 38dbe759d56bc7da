# Event kinds (wire value of ``eventType``)
(USER_REGISTERED, EMAIL_VERIFIED, ROLE_CHANGED, ACCOUNT_DISABLED) = (
    'USER_REGISTERED', 'EMAIL_VERIFIED',
    'ROLE_CHANGED', 'ACCOUNT_DISABLED'
)

EVENT_KIND_CHOICES = [
    (USER_REGISTERED, 'Identity Created'),
    (EMAIL_VERIFIED, 'Email Verified'),
    (ROLE_CHANGED, 'Role Changed'),
    (ACCOUNT_DISABLED, 'Account Disabled'),
]

# topic key in settings.IDENTITY_EVENT_TOPICS -> event kind
TOPIC_EVENT_KINDS = {
    'identity-created': USER_REGISTERED,
    'email-verified': EMAIL_VERIFIED,
    'role-changed': ROLE_CHANGED,
    'account-disabled': ACCOUNT_DISABLED,
}

# Ledger
PROCESSED, FAILED = 'PROCESSED', 'FAILED'

PROCESSED_EVENT_STATUS_CHOICES = [
    (PROCESSED, 'Processed'),
    (FAILED, 'Failed'),
]

# Roles as sent by the identity service
APPLICANT, COMPANY_ADMIN, HR = 'APPLICANT', 'COMPANY_ADMIN', 'HR'

PARKED_STREAM_SUFFIX = '.parked'

LOG_PREFIX = '[EVENT_CONSUMER]'
