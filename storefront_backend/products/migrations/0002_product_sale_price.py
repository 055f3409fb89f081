"""
MIGRATION: Product.sale_price (optional discounted price)
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="product",
            name="sale_price",
            field=models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True),
        ),
        migrations.AddConstraint(
            model_name="product",
            constraint=models.CheckConstraint(
                condition=models.Q(("sale_price__isnull", True), ("sale_price__gte", 0), _connector="OR"),
                name="chk_product_sale_price_gte_zero",
            ),
        ),
    ]
