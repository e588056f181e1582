"""
Tests for member registration (service and API)
"""
from decimal import Decimal
from django.contrib.auth.hashers import check_password
from django.test import TestCase
from rest_framework.test import APIClient
from core.binary.models import MetricRecord, TreeNode
from core.binary.tests.helpers import TreeFixtureMixin
from core.members.models import Member
from core.registration.services import RegistrationError, register_member
from core.settings.models import PlatformSettings


class RegisterMemberTest(TreeFixtureMixin, TestCase):

    def data(self, username, **extra):
        return self.registration(username, **extra)

    def test_auto_places_under_sponsor(self):
        first = register_member(self.data('B'))
        second = register_member(self.data('C'))

        self.assertEqual((first.assigned_parent_id, first.assigned_side), (self.root_id, 'left'))
        self.assertEqual((second.assigned_parent_id, second.assigned_side), (first.member_id, 'left'))

    def test_requested_side(self):
        result = register_member(self.data('B', placement_side='right'))
        self.assertEqual(result.assigned_side, 'right')
        self.assertEqual(TreeNode.objects.get(pk=self.root_id).right_child_id, result.member_id)

    def test_default_side_from_settings(self):
        settings = PlatformSettings.get_settings()
        settings.binary_tree_default_placement_side = 'right'
        settings.save()

        result = register_member(self.data('B'))
        self.assertEqual(result.assigned_side, 'right')

    def test_explicit_parent(self):
        b = register_member(self.data('B')).member_id
        result = register_member(self.data('C', placement_parent_id=b, placement_side='right'))

        self.assertEqual(result.assigned_parent_id, b)
        self.assertEqual(Member.objects.get(pk=result.member_id).sponsor.username, 'A')

    def test_placement_username(self):
        register_member(self.data('B'))
        result = register_member(self.data('C', placement_username='B', placement_side='right'))
        self.assertEqual(result.assigned_parent_id, Member.objects.get(username='B').pk)

    def test_unknown_placement_username(self):
        with self.assertRaises(RegistrationError) as ctx:
            register_member(self.data('C', placement_username='ghost'))
        self.assertIn('placement_username', ctx.exception.errors)

    def test_duplicates(self):
        register_member(self.data('B', phone='08030000001'))

        with self.assertRaises(RegistrationError) as ctx:
            register_member(self.data('B', email='other@example.com', phone='08030000001'))
        self.assertEqual(set(ctx.exception.errors), {'username', 'phone'})

        with self.assertRaises(RegistrationError) as ctx:
            register_member(self.data('C', email='b@example.com'))
        self.assertEqual(set(ctx.exception.errors), {'email'})

    def test_unknown_sponsor(self):
        with self.assertRaises(RegistrationError) as ctx:
            register_member(self.data('B', sponsor_username='nobody'))
        self.assertIn('sponsor_username', ctx.exception.errors)

    def test_sponsor_not_in_tree(self):
        Member.objects.create_member(username='floating')
        with self.assertRaises(RegistrationError) as ctx:
            register_member(self.data('B', sponsor_username='floating'))
        self.assertIn('sponsor_username', ctx.exception.errors)


class RegistrationViewTest(TreeFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.client.force_authenticate(Member.objects.get(pk=self.root_id))

    def payload(self, username, **extra):
        payload = {
            'username': username,
            'sponsor_username': 'A',
            'first_name': 'New',
            'last_name': 'Member',
            'email': f'{username.lower()}@example.com',
            'phone': '08031234567',
            'country_id': self.country.pk,
            'region_id': self.region.pk,
            'package_id': self.package_50.pk,
            'password': 'secret123',
            'transaction_pin': '1234',
        }
        payload.update(extra)
        return payload

    def test_register(self):
        response = self.client.post('/api/registration/', self.payload('Bola', placement_side='Left'), format='json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['assigned_parent_id'], self.root_id)
        self.assertEqual(data['assigned_side'], 'left')
        self.assertEqual(float(data['resulting_metrics']['left_pv']), 50.0)

        member = Member.objects.get(username='Bola')
        self.assertTrue(member.check_password('secret123'))
        self.assertTrue(check_password('1234', member.transaction_pin_hash))
        self.assertEqual(member.registered_by, 'A')
        self.assertEqual(MetricRecord.objects.get(pk=member.pk).personal_pv, Decimal('50'))

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.post('/api/registration/', self.payload('Bola'), format='json')
        self.assertEqual(response.status_code, 401)

    def test_invalid_payload(self):
        response = self.client.post(
            '/api/registration/',
            self.payload('Bola', transaction_pin='12ab', placement_side='middle'),
            format='json'
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn('transaction_pin', response.json())
        self.assertIn('placement_side', response.json())

    def test_position_taken(self):
        self.place('B', self.root_id, 'left')
        response = self.client.post(
            '/api/registration/',
            self.payload('Bola', placement_parent_id=self.root_id, placement_side='left'),
            format='json'
        )
        self.assertEqual(response.status_code, 409)
        self.assertIn('error', response.json())

    def test_duplicate_username(self):
        self.place('Bola', self.root_id, 'left')
        response = self.client.post('/api/registration/', self.payload('Bola', email='bola2@example.com'), format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(set(response.json()['errors']), {'username'})
        self.assertEqual(Member.objects.filter(username='Bola').count(), 1)

    def test_parent_not_found(self):
        response = self.client.post(
            '/api/registration/',
            self.payload('Bola', placement_parent_id=999999, placement_side='left'),
            format='json'
        )
        self.assertEqual(response.status_code, 404)

    def test_inactive_package(self):
        self.package_50.status = 'inactive'
        self.package_50.save()
        response = self.client.post('/api/registration/', self.payload('Bola'), format='json')
        self.assertEqual(response.status_code, 400)

    def test_slot_search_exhausted(self):
        self.place_chain('L', 2, 'left')
        settings = PlatformSettings.get_settings()
        settings.binary_slot_search_max_depth = 1
        settings.save()

        response = self.client.post('/api/registration/', self.payload('Bola', placement_side='left'), format='json')
        self.assertEqual(response.status_code, 422)
