from django.db import models
from core.countries.models import Country


class Package(models.Model):
    """
    Purchasable membership package carrying point value (PV) and business value (BV).
    The PV/BV of the package bought at registration is what flows up the binary tree.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    TYPE_CHOICES = [
        ('standard', 'Standard'),
        ('premium', 'Premium'),
        ('enterprise', 'Enterprise'),
    ]

    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    pv = models.DecimalField(max_digits=12, decimal_places=2, help_text="Point value credited on purchase")
    # BV equals PV in the current pricing model; left blank it is copied from PV on save
    bv = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Business value credited on purchase (defaults to PV)"
    )
    bottles = models.IntegerField(default=0)
    package_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='standard')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'packages'
        verbose_name = 'Package'
        verbose_name_plural = 'Packages'
        ordering = ['pv']

    def __str__(self):
        return f"{self.name} ({self.pv} PV)"

    def save(self, *args, **kwargs):
        if self.bv is None:
            self.bv = self.pv
        super().save(*args, **kwargs)

    @property
    def is_active(self):
        return self.status == 'active'

    def price_for(self, country):
        """Return the package price in the country's currency, or None if not priced there"""
        price = self.prices.filter(country=country).first()
        return price.price if price else None


class PackagePrice(models.Model):
    """
    Price of a package in one country's currency
    """
    package = models.ForeignKey(Package, on_delete=models.CASCADE, related_name='prices')
    country = models.ForeignKey(Country, on_delete=models.CASCADE, related_name='package_prices')
    price = models.DecimalField(max_digits=14, decimal_places=2)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'package_prices'
        verbose_name = 'Package Price'
        verbose_name_plural = 'Package Prices'
        constraints = [
            models.UniqueConstraint(fields=['package', 'country'], name='unique_package_country_price'),
        ]

    def __str__(self):
        return f"{self.package.name} - {self.country.currency} {self.price}"
