from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('countries', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Package',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True)),
                ('pv', models.DecimalField(decimal_places=2, help_text='Point value credited on purchase', max_digits=12)),
                ('bv', models.DecimalField(blank=True, decimal_places=2, help_text='Business value credited on purchase (defaults to PV)', max_digits=12, null=True)),
                ('bottles', models.IntegerField(default=0)),
                ('package_type', models.CharField(choices=[('standard', 'Standard'), ('premium', 'Premium'), ('enterprise', 'Enterprise')], default='standard', max_length=20)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Package',
                'verbose_name_plural': 'Packages',
                'db_table': 'packages',
                'ordering': ['pv'],
            },
        ),
        migrations.CreateModel(
            name='PackagePrice',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('price', models.DecimalField(decimal_places=2, max_digits=14)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('country', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='package_prices', to='countries.country')),
                ('package', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='prices', to='packages.package')),
            ],
            options={
                'verbose_name': 'Package Price',
                'verbose_name_plural': 'Package Prices',
                'db_table': 'package_prices',
            },
        ),
        migrations.AddConstraint(
            model_name='packageprice',
            constraint=models.UniqueConstraint(fields=('package', 'country'), name='unique_package_country_price'),
        ),
    ]
