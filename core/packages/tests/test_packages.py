from decimal import Decimal
from django.test import TestCase
from core.countries.models import Country, Region
from core.packages.models import Package, PackagePrice


class PackageTest(TestCase):

    def setUp(self):
        self.nigeria = Country.objects.create(name='Nigeria', code='ng', currency='NGN')
        self.ghana = Country.objects.create(name='Ghana', code='GH', currency='GHS')

    def test_bv_defaults_to_pv(self):
        package = Package.objects.create(name='Gold', pv=Decimal('50'))
        self.assertEqual(package.bv, Decimal('50'))

        package = Package.objects.create(name='Promo', pv=Decimal('50'), bv=Decimal('40'))
        self.assertEqual(package.bv, Decimal('40'))

    def test_price_for_country(self):
        package = Package.objects.create(name='Gold', pv=Decimal('50'))
        PackagePrice.objects.create(package=package, country=self.nigeria, price=Decimal('25000'))

        self.assertEqual(package.price_for(self.nigeria), Decimal('25000'))
        self.assertIsNone(package.price_for(self.ghana))

    def test_country_code_uppercased(self):
        self.assertEqual(self.nigeria.code, 'NG')

    def test_active_flags(self):
        region = Region.objects.create(country=self.nigeria, name='Lagos', status='inactive')
        self.assertTrue(self.nigeria.is_active)
        self.assertFalse(region.is_active)
