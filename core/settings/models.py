from django.conf import settings as django_settings
from django.db import models


class PlatformSettings(models.Model):
    """
    Singleton model for platform-wide settings.
    Only one instance should exist in the database.
    """
    # Binary Tree Settings
    binary_propagation_depth_cap = models.IntegerField(
        null=True,
        blank=True,
        help_text="Maximum number of ancestors that receive PV/BV from a new placement. Null propagates all the way to the root."
    )
    binary_slot_search_max_depth = models.IntegerField(
        default=15,
        help_text="How many levels down one leg the open-slot search may walk before giving up (default: 15)"
    )
    binary_tree_default_placement_side = models.CharField(
        max_length=5,
        choices=[('left', 'Left'), ('right', 'Right')],
        default='left',
        help_text="Leg used for automatic placement when the registration names no side"
    )

    # Dashboard Settings
    new_member_window_days = models.IntegerField(
        default=7,
        help_text="Rolling window, in days, for the 'this week' counters on the tree dashboard (default: 7)"
    )

    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        django_settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_settings',
        help_text="Member who last updated these settings"
    )

    class Meta:
        db_table = 'platform_settings'
        verbose_name = 'Platform Settings'
        verbose_name_plural = 'Platform Settings'

    def __str__(self):
        cap = self.binary_propagation_depth_cap if self.binary_propagation_depth_cap is not None else "unlimited"
        return f"Platform Settings (propagation cap: {cap})"

    @classmethod
    def get_settings(cls):
        """
        Get or create the singleton settings instance.
        Returns the single PlatformSettings instance.
        """
        settings, created = cls.objects.get_or_create(
            pk=1,
            defaults={
                'binary_propagation_depth_cap': None,
                'binary_slot_search_max_depth': 15,
                'binary_tree_default_placement_side': 'left',
                'new_member_window_days': 7,
            }
        )
        return settings

    def save(self, *args, **kwargs):
        """
        Override save to ensure only one instance exists.
        Always save with pk=1 to maintain singleton pattern.
        """
        self.pk = 1
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """
        Prevent deletion of the settings instance.
        """
        raise Exception("Cannot delete PlatformSettings. It is a singleton.")
