"""Category model.

Business rules implemented:
- Category name must be unique in the system.
- A category cannot be deleted while products reference it
  (``Product.category`` uses ``PROTECT``; the service checks first so the
  caller receives a domain error instead of ``ProtectedError``).
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "categories"
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name
