"""
Recruitment
===========

Application lifecycle
---------------------

An applicant applies once per job posting. The application then moves
forward one step at a time, and may be rejected or withdrawn at any step:

    SUBMITTED -> UNDER_REVIEW -> INTERVIEW_SCHEDULED -> INTERVIEWED
        -> OFFER_EXTENDED -> ACCEPTED

    (any non-final step) -> REJECTED | WITHDRAWN

ACCEPTED, REJECTED and WITHDRAWN are final. Entering a step stamps its
timestamp once (reviewed_at, interview_scheduled_at, interviewed_at,
offer_extended_at, finalized_at).

Interview lifecycle
-------------------

Interviews belong to an application and drive it:

1. scheduling an interview moves the application to INTERVIEW_SCHEDULED
2. completing it moves the application to INTERVIEWED
3. a no-show rejects the application
4. cancelling it leaves the application alone

Interview changes and the resulting application change commit together.
Interviews never write application rows themselves; they go through
:class:`irecruit.recruitment.utils.application.ApplicationLifecycle`.
"""
