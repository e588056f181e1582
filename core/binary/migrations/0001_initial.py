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
            name='TreeNode',
            fields=[
                ('member', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='tree_node', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('side', models.CharField(blank=True, choices=[('left', 'Left'), ('right', 'Right')], max_length=5, null=True)),
                ('level', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='children', to='binary.treenode')),
                ('left_child', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='binary.treenode')),
                ('right_child', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='binary.treenode')),
            ],
            options={
                'verbose_name': 'Tree Node',
                'verbose_name_plural': 'Tree Nodes',
                'db_table': 'tree_nodes',
            },
        ),
        migrations.CreateModel(
            name='MetricRecord',
            fields=[
                ('member', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, primary_key=True, related_name='metrics', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('personal_pv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('personal_bv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('left_pv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('right_pv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('total_pv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('left_bv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('right_bv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('total_bv', models.DecimalField(decimal_places=2, default=0, max_digits=16)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Member Metrics',
                'verbose_name_plural': 'Member Metrics',
                'db_table': 'member_metrics',
            },
        ),
        migrations.AddConstraint(
            model_name='treenode',
            constraint=models.UniqueConstraint(condition=models.Q(('parent__isnull', False)), fields=('parent', 'side'), name='unique_parent_side'),
        ),
    ]
