from django.test import TestCase
from rest_framework.test import APIClient
from core.members.models import Member
from core.settings.models import PlatformSettings


class PlatformSettingsModelTest(TestCase):

    def test_singleton(self):
        first = PlatformSettings.get_settings()
        second = PlatformSettings.get_settings()
        self.assertEqual(first.pk, 1)
        self.assertEqual(second.pk, 1)
        self.assertEqual(PlatformSettings.objects.count(), 1)

    def test_defaults(self):
        settings = PlatformSettings.get_settings()
        self.assertIsNone(settings.binary_propagation_depth_cap)
        self.assertEqual(settings.binary_slot_search_max_depth, 15)
        self.assertEqual(settings.binary_tree_default_placement_side, 'left')
        self.assertEqual(settings.new_member_window_days, 7)

    def test_cannot_delete(self):
        with self.assertRaises(Exception):
            PlatformSettings.get_settings().delete()


class SettingsEndpointTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.member = Member.objects.create_user(username='member', password='memberpass123')
        self.staff = Member.objects.create_user(username='admin', password='adminpass123', is_staff=True)

    def test_get(self):
        self.client.force_authenticate(self.member)
        response = self.client.get('/api/settings/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['binary_slot_search_max_depth'], 15)

    def test_patch_requires_staff(self):
        self.client.force_authenticate(self.member)
        response = self.client.patch('/api/settings/', {'new_member_window_days': 14}, format='json')
        self.assertEqual(response.status_code, 403)
        self.assertEqual(PlatformSettings.get_settings().new_member_window_days, 7)

    def test_patch(self):
        self.client.force_authenticate(self.staff)
        response = self.client.patch(
            '/api/settings/',
            {'binary_propagation_depth_cap': 10, 'binary_tree_default_placement_side': 'right'},
            format='json'
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['updated_by_username'], 'admin')

        settings = PlatformSettings.get_settings()
        self.assertEqual(settings.binary_propagation_depth_cap, 10)
        self.assertEqual(settings.binary_tree_default_placement_side, 'right')

    def test_patch_validation(self):
        self.client.force_authenticate(self.staff)
        response = self.client.patch('/api/settings/', {'binary_propagation_depth_cap': 0}, format='json')
        self.assertEqual(response.status_code, 400)

        response = self.client.patch('/api/settings/', {'new_member_window_days': 0}, format='json')
        self.assertEqual(response.status_code, 400)
