# sales/models/sale_attachment.py

from django.db import models


class SaleAttachment(models.Model):
    """
    Supporting document for a sale (deposit slip, register tape...).

    `path` is the storage key in default_storage; the file itself is
    removed by the service that deletes the row.
    """

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.CASCADE,
        related_name="attachments",
    )
    filename = models.CharField(max_length=255)
    path = models.CharField(max_length=500)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return self.filename
