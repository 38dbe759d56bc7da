from django.db import models

from irecruit.common.models import TimeStampedModel, UUIDModel, SoftDeleteModel


class JobPosting(UUIDModel, TimeStampedModel, SoftDeleteModel):
    company = models.ForeignKey(
        'identity.Company',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='job_postings'
    )
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    class Meta(TimeStampedModel.Meta):
        pass

    def __str__(self):
        return self.title
