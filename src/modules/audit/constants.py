from django.db import models


class AuditAction(models.TextChoices):
    STATUS_CHANGE = "STATUS_CHANGE", "Status change"
    CANCEL = "CANCEL", "Cancel"
