from .abstract import TimeStampedModel, UUIDModel, SoftDeleteModel
