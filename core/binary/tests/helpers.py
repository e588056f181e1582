"""
Shared fixtures for binary tree tests
"""
from decimal import Decimal
from core.binary.utils import create_root_member, place_member
from core.countries.models import Country, Region
from core.packages.models import Package, PackagePrice


class TreeFixtureMixin:
    """Country, region, packages and a root member 'A'"""

    def setUp(self):
        self.country = Country.objects.create(name='Nigeria', code='ng', currency='NGN', currency_symbol='₦')
        self.region = Region.objects.create(country=self.country, name='Lagos', code='LA')
        self.package_50 = self.make_package('Gold', 50)
        self.package_30 = self.make_package('Silver', 30)
        self.package_20 = self.make_package('Bronze', 20)
        self.root = create_root_member({'username': 'A', 'registered_by': 'system'})
        self.root_id = self.root.pk

    def make_package(self, name, pv, price=None):
        package = Package.objects.create(name=name, pv=Decimal(pv))
        if price is not None:
            PackagePrice.objects.create(package=package, country=self.country, price=Decimal(price))
        return package

    def registration(self, username, package=None, **extra):
        data = {
            'username': username,
            'sponsor_username': 'A',
            'first_name': username,
            'last_name': 'Member',
            'email': f'{username.lower()}@example.com',
            'phone': None,
            'country_id': self.country.pk,
            'region_id': self.region.pk,
            'package_id': (package or self.package_50).pk,
            'password_hash': None,
            'pin_hash': None,
            'registered_by': 'A',
        }
        data.update(extra)
        return data

    def place(self, username, parent_id, side, package=None, **extra):
        return place_member(self.registration(username, package, **extra), parent_id, side)

    def place_chain(self, prefix, count, side, package=None):
        """Place count members in a single-file chain down one side of the root; returns their ids"""
        ids = []
        parent_id = self.root_id
        for i in range(count):
            result = self.place(f'{prefix}{i}', parent_id, side, package)
            ids.append(result.member_id)
            parent_id = result.member_id
        return ids
