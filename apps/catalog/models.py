from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Product(models.Model):
    CATEGORY_BREAD = "bread"
    CATEGORY_PASTRY = "pastry"
    CATEGORY_CAKE = "cake"
    CATEGORY_DRINK = "drink"

    CATEGORY_CHOICES = [
        (CATEGORY_BREAD, "Bread"),
        (CATEGORY_PASTRY, "Pastry"),
        (CATEGORY_CAKE, "Cake"),
        (CATEGORY_DRINK, "Drink"),
    ]

    SIZE_SMALL = "small"
    SIZE_MEDIUM = "medium"
    SIZE_LARGE = "large"

    SIZE_CHOICES = [
        (SIZE_SMALL, "Small"),
        (SIZE_MEDIUM, "Medium"),
        (SIZE_LARGE, "Large"),
    ]

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default=CATEGORY_BREAD)
    size = models.CharField(max_length=10, choices=SIZE_CHOICES)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0.01)])
    images = models.JSONField(default=list, blank=True)
    is_available = models.BooleanField(default=True)
    # Signed on purpose: orders decrement without a floor check.
    stock = models.IntegerField(default=0)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["category", "is_available"], name="catalog_product_cat_avail_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.size})"
