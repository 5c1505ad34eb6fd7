from django.db import models


class ProductSnapshot(models.Model):
    """Server copy of a product as it was when the edit form was loaded."""

    product_id = models.CharField(max_length=100, primary_key=True)
    data = models.JSONField(default=dict)
    data_hash = models.CharField(max_length=64)
    form_hash = models.CharField(max_length=64, blank=True, default='')
    captured_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product_id} ({self.captured_at})"
