import uuid

from django.db import models
from django.utils import timezone


class UUIDModel(models.Model):
    """
    Rows are referenced across services, so they are keyed by uuid instead
    of a sequence.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ('-created_at', '-modified_at')


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted=False)


class SoftDeleteModel(models.Model):
    deleted = models.BooleanField(default=False, db_index=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    deleted_by_ref = models.CharField(max_length=64, blank=True)

    objects = SoftDeleteQuerySet.as_manager()

    class Meta:
        abstract = True

    def mark_deleted(self, actor_ref):
        self.deleted = True
        self.deleted_at = timezone.now()
        self.deleted_by_ref = actor_ref or ''
