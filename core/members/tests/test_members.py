from django.test import TestCase
from core.members.models import Member


class MemberManagerTest(TestCase):

    def test_create_member_with_hash(self):
        member = Member.objects.create_member(username='bola', password_hash='pbkdf2_sha256$1$salt$hash')
        self.assertEqual(member.password, 'pbkdf2_sha256$1$salt$hash')
        self.assertTrue(member.is_active)

    def test_create_member_without_password(self):
        member = Member.objects.create_member(username='bola')
        self.assertFalse(member.has_usable_password())

    def test_create_member_requires_username(self):
        with self.assertRaises(ValueError):
            Member.objects.create_member(username='')

    def test_create_superuser(self):
        admin = Member.objects.create_superuser(username='root', password='rootpass123')
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password('rootpass123'))

    def test_inactive_status(self):
        member = Member.objects.create_member(username='bola', status='inactive')
        self.assertFalse(member.is_active)

    def test_full_name(self):
        member = Member.objects.create_member(username='bola', first_name='Bola', last_name='Ade')
        self.assertEqual(member.get_full_name(), 'Bola Ade')
        self.assertEqual(member.get_short_name(), 'Bola')
