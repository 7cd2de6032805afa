"""Custom order request constants."""

from django.db import models


class CustomOrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    CONVERTED = "Converted", "Converted"
    REJECTED = "Rejected", "Rejected"
