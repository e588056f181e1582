from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PlatformSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('binary_propagation_depth_cap', models.IntegerField(blank=True, help_text='Maximum number of ancestors that receive PV/BV from a new placement. Null propagates all the way to the root.', null=True)),
                ('binary_slot_search_max_depth', models.IntegerField(default=15, help_text='How many levels down one leg the open-slot search may walk before giving up (default: 15)')),
                ('binary_tree_default_placement_side', models.CharField(choices=[('left', 'Left'), ('right', 'Right')], default='left', help_text='Leg used for automatic placement when the registration names no side', max_length=5)),
                ('new_member_window_days', models.IntegerField(default=7, help_text="Rolling window, in days, for the 'this week' counters on the tree dashboard (default: 7)")),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('updated_by', models.ForeignKey(blank=True, help_text='Member who last updated these settings', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_settings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Platform Settings',
                'verbose_name_plural': 'Platform Settings',
                'db_table': 'platform_settings',
            },
        ),
    ]
