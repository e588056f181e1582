"""
API tests for /api/tree/
"""
from django.test import TestCase
from rest_framework.test import APIClient
from core.members.models import Member
from .helpers import TreeFixtureMixin


class BinaryTreeViewTest(TreeFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.b = self.place('B', self.root_id, 'left', self.package_50).member_id
        self.c = self.place('C', self.root_id, 'right', self.package_30).member_id
        self.d = self.place('D', self.b, 'left', self.package_20).member_id
        self.staff = Member.objects.create_user(username='admin', password='adminpass123', is_staff=True)

    def test_requires_authentication(self):
        response = self.client.get(f'/api/tree/{self.root_id}/')
        self.assertEqual(response.status_code, 401)

    def test_tree_with_stats(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/tree/{self.root_id}/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['data']['username'], 'A')
        self.assertEqual(data['data']['children']['left']['children']['left']['username'], 'D')
        self.assertEqual(data['stats']['team_members']['count'], 3)

    def test_unknown_member(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/tree/999999/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'No tree for this member')

    def test_member_reads_own_subtree_only(self):
        self.client.force_authenticate(Member.objects.get(pk=self.b))

        self.assertEqual(self.client.get(f'/api/tree/{self.b}/').status_code, 200)
        self.assertEqual(self.client.get(f'/api/tree/{self.d}/').status_code, 200)
        self.assertEqual(self.client.get(f'/api/tree/{self.c}/').status_code, 403)
        self.assertEqual(self.client.get(f'/api/tree/{self.root_id}/stats/').status_code, 403)

    def test_member_outside_tree(self):
        self.client.force_authenticate(Member.objects.create_user(username='outsider', password='pass12345'))
        self.assertEqual(self.client.get(f'/api/tree/{self.b}/').status_code, 403)

    def test_stats(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/tree/{self.b}/stats/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['team_members'], {'count': 1, 'this_week': 1})
        self.assertEqual(float(data['left_leg']['pv']), 20.0)

    def test_open_slot(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get(f'/api/tree/{self.root_id}/open-slot/', {'side': 'LEFT'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'parent_id': self.d, 'side': 'left'})

        response = self.client.get(f'/api/tree/{self.root_id}/open-slot/')
        self.assertEqual(response.json()['side'], 'left')

    def test_open_slot_exhausted(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/tree/{self.root_id}/open-slot/', {'side': 'left', 'max_depth': 1})
        self.assertEqual(response.status_code, 422)

    def test_open_slot_bad_side(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get(f'/api/tree/{self.root_id}/open-slot/', {'side': 'up'})
        self.assertEqual(response.status_code, 400)

    def test_my_tree(self):
        self.client.force_authenticate(Member.objects.get(pk=self.b))
        response = self.client.get('/api/tree/my_tree/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['member'], self.b)
        self.assertEqual(data['left_child'], self.d)
        self.assertEqual(data['side'], 'left')

    def test_my_tree_without_node(self):
        self.client.force_authenticate(self.staff)
        self.assertEqual(self.client.get('/api/tree/my_tree/').status_code, 404)
