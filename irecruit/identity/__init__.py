"""
Identity reconciliation
=======================

Accounts live in the identity service. Every account that matters to the
platform gets exactly one domain entity here, chosen by the account's role
at registration:

    APPLICANT      -> JobSeeker
    COMPANY_ADMIN  -> Company
    HR             -> StaffMember

The identity service publishes four kinds of events, each on its own topic:

1. identity-created   : account registered, creates the domain entity
2. email-verified     : flags ``email_verified`` on the entity
3. role-changed       : recorded only, no entity is migrated
4. account-disabled   : flags ``active = False`` on the entity

Delivery is at-least-once. Whether an event was already applied is decided by
the ``ProcessedEvent`` ledger, inside the same transaction as the entity
change, so a redelivered event is skipped and a crashed one is replayed.
"""
