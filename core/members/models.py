from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from .managers import MemberManager


class Member(AbstractBaseUser, PermissionsMixin):
    """
    MLM member record (the member ledger).
    Identity fields are written once at registration; only status changes afterwards.
    The sponsor is the commission sponsor and is independent from the tree parent.
    """
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, unique=True, null=True, blank=True)

    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)

    sponsor = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sponsored_members'
    )

    country = models.ForeignKey(
        'countries.Country',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='members'
    )
    region = models.ForeignKey(
        'countries.Region',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='members'
    )
    package = models.ForeignKey(
        'packages.Package',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='members'
    )

    transaction_pin_hash = models.CharField(max_length=128, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='active')
    total_amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=0,
        help_text="Package price in the member's country at registration"
    )
    registered_by = models.CharField(max_length=150, blank=True)

    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)

    objects = MemberManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'members'
        verbose_name = 'Member'
        verbose_name_plural = 'Members'

    def __str__(self):
        return self.username

    @property
    def is_active(self):
        return self.status == 'active'

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self):
        return self.first_name or self.username
