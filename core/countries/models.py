from django.db import models


STATUS_CHOICES = [
    ('active', 'Active'),
    ('inactive', 'Inactive'),
]


class Country(models.Model):
    """
    Country a member registers from. Packages are priced per country.
    """
    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=3, unique=True, help_text="ISO country code, stored uppercase")
    currency = models.CharField(max_length=3)
    currency_symbol = models.CharField(max_length=5, blank=True)
    pv_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        help_text="Local currency value of one PV"
    )
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'countries'
        verbose_name = 'Country'
        verbose_name_plural = 'Countries'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.code})"

    def save(self, *args, **kwargs):
        if self.code:
            self.code = self.code.upper()
        super().save(*args, **kwargs)

    @property
    def is_active(self):
        return self.status == 'active'


class Region(models.Model):
    """
    Region (state) within a country
    """
    country = models.ForeignKey(Country, on_delete=models.CASCADE, related_name='regions')
    name = models.CharField(max_length=100)
    code = models.CharField(max_length=10, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'regions'
        verbose_name = 'Region'
        verbose_name_plural = 'Regions'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['country', 'name'], name='unique_country_region_name'),
        ]

    def __str__(self):
        return f"{self.name}, {self.country.code}"

    @property
    def is_active(self):
        return self.status == 'active'
