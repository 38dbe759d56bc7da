from django.db import models

from irecruit.common.models import TimeStampedModel, UUIDModel


class DomainEntity(UUIDModel, TimeStampedModel):
    """
    Platform-side projection of an identity account. Only the identity
    consumer creates or mutates these rows.
    """
    identity_ref = models.CharField(max_length=64, unique=True, editable=False)
    email = models.EmailField(db_index=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    email_verified = models.BooleanField(default=False)
    active = models.BooleanField(default=True)

    class Meta(TimeStampedModel.Meta):
        abstract = True

    def __str__(self):
        return self.full_name or self.email

    @property
    def full_name(self):
        return ' '.join(filter(None, (self.first_name, self.last_name)))


class JobSeeker(DomainEntity):
    phone_number = models.CharField(max_length=32, blank=True)
    date_of_birth = models.DateField(null=True, blank=True)
    linkedin_profile = models.URLField(blank=True)
    resume_url = models.URLField(blank=True)
    current_location = models.CharField(max_length=255, blank=True)
    profile_complete = models.BooleanField(default=False)


class Company(DomainEntity):
    name = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255, blank=True)
    telephone = models.CharField(max_length=32, blank=True)
    verified = models.BooleanField(default=False)

    class Meta(DomainEntity.Meta):
        verbose_name_plural = 'companies'

    def __str__(self):
        return self.name or super().__str__()


class StaffMember(DomainEntity):
    # employer as given in the registration context; may precede the
    # company's own projection
    employer_ref = models.CharField(max_length=64, blank=True, db_index=True)
    department = models.CharField(max_length=150, blank=True)
    position = models.CharField(max_length=150, blank=True)
    hire_date = models.DateField(null=True, blank=True)


# Order is the lookup order when the variant of an identity is unknown.
DOMAIN_ENTITY_MODELS = (JobSeeker, Company, StaffMember)
