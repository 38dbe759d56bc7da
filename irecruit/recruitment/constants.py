(SUBMITTED, UNDER_REVIEW, INTERVIEW_SCHEDULED, INTERVIEWED,
 OFFER_EXTENDED, ACCEPTED, REJECTED, WITHDRAWN) = (
    'SUBMITTED', 'UNDER_REVIEW', 'INTERVIEW_SCHEDULED', 'INTERVIEWED',
    'OFFER_EXTENDED', 'ACCEPTED', 'REJECTED', 'WITHDRAWN'
)

APPLICATION_STATUS_CHOICES = [
    (SUBMITTED, 'Submitted'),
    (UNDER_REVIEW, 'Under Review'),
    (INTERVIEW_SCHEDULED, 'Interview Scheduled'),
    (INTERVIEWED, 'Interviewed'),
    (OFFER_EXTENDED, 'Offer Extended'),
    (ACCEPTED, 'Accepted'),
    (REJECTED, 'Rejected'),
    (WITHDRAWN, 'Withdrawn'),
]

TERMINAL_APPLICATION_STATUSES = frozenset({ACCEPTED, REJECTED, WITHDRAWN})

APPLICATION_TRANSITIONS = {
    SUBMITTED: {UNDER_REVIEW, REJECTED, WITHDRAWN},
    UNDER_REVIEW: {INTERVIEW_SCHEDULED, REJECTED, WITHDRAWN},
    INTERVIEW_SCHEDULED: {INTERVIEWED, REJECTED, WITHDRAWN},
    INTERVIEWED: {OFFER_EXTENDED, REJECTED, WITHDRAWN},
    OFFER_EXTENDED: {ACCEPTED, REJECTED, WITHDRAWN},
    ACCEPTED: set(),
    REJECTED: set(),
    WITHDRAWN: set(),
}

# status entered -> timestamp field stamped the first time
APPLICATION_STATUS_TIMESTAMPS = {
    UNDER_REVIEW: 'reviewed_at',
    INTERVIEW_SCHEDULED: 'interview_scheduled_at',
    INTERVIEWED: 'interviewed_at',
    OFFER_EXTENDED: 'offer_extended_at',
    ACCEPTED: 'finalized_at',
    REJECTED: 'finalized_at',
    WITHDRAWN: 'finalized_at',
}

# Documents
COVER_LETTER, RESUME, PORTFOLIO = 'coverLetter', 'resume', 'portfolio'

DOCUMENT_TYPE_CHOICES = [
    (COVER_LETTER, 'Cover Letter'),
    (RESUME, 'Resume'),
    (PORTFOLIO, 'Portfolio'),
]

# document type -> Application field holding its storage ref
DOCUMENT_REF_FIELDS = {
    COVER_LETTER: 'cover_letter_ref',
    RESUME: 'resume_ref',
    PORTFOLIO: 'portfolio_ref',
}

# Interviews
PHONE, VIDEO, ONSITE = 'PHONE', 'VIDEO', 'ONSITE'

INTERVIEW_TYPE_CHOICES = [
    (PHONE, 'Phone'),
    (VIDEO, 'Video'),
    (ONSITE, 'Onsite'),
]

SCHEDULED, COMPLETED, CANCELLED, NO_SHOW = (
    'SCHEDULED', 'COMPLETED', 'CANCELLED', 'NO_SHOW'
)

INTERVIEW_STATUS_CHOICES = [
    (SCHEDULED, 'Scheduled'),
    (COMPLETED, 'Completed'),
    (CANCELLED, 'Cancelled'),
    (NO_SHOW, 'No Show'),
]

NO_SHOW_REJECTION_REASON = 'No-show for interview'

MIN_INTERVIEW_RATING, MAX_INTERVIEW_RATING = 1, 10

# Referential existence checks
(JOB_SEEKER, JOB_POSTING, APPLICATION, INTERVIEWER) = (
    'Job seeker', 'Job posting', 'Application', 'Interviewer'
)
