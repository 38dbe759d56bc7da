from rest_framework.permissions import BasePermission, SAFE_METHODS

from irecruit.identity.constants import APPLICANT, COMPANY_ADMIN, HR

RECRUITMENT_ROLES = [APPLICANT, HR, COMPANY_ADMIN]


def build_role_permission(name, allowed_to=None, limit_write_to=None):
    """
    :param allowed_to: roles allowed for safe methods, and for every method
        when `limit_write_to` is not given
    :param limit_write_to: roles allowed for unsafe methods
    """
    def has_permission(self, request, view):
        role = getattr(request.user, 'role', '')
        if limit_write_to is not None and request.method not in SAFE_METHODS:
            return role in limit_write_to
        return role in (allowed_to or [])

    return type(name, (BasePermission,), {'has_permission': has_permission})


RecruitmentStaffPermission = build_role_permission(
    'RecruitmentStaffPermission',
    allowed_to=[HR, COMPANY_ADMIN]
)

ApplicantPermission = build_role_permission(
    'ApplicantPermission',
    allowed_to=[APPLICANT]
)

RecruitmentReadPermission = build_role_permission(
    'RecruitmentReadPermission',
    allowed_to=RECRUITMENT_ROLES
)

InterviewPermission = build_role_permission(
    'InterviewPermission',
    allowed_to=RECRUITMENT_ROLES,
    limit_write_to=[HR, COMPANY_ADMIN]
)
