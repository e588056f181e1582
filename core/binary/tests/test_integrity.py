from decimal import Decimal
from io import StringIO
from unittest.mock import patch
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from core.binary.integrity import check_tree_integrity
from core.binary.models import MetricRecord, TreeNode
from core.binary.tasks import audit_tree_integrity
from core.settings.models import PlatformSettings
from .helpers import TreeFixtureMixin


class TreeIntegrityTest(TreeFixtureMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.b = self.place('B', self.root_id, 'left', self.package_50).member_id
        self.c = self.place('C', self.root_id, 'right', self.package_30).member_id
        self.d = self.place('D', self.b, 'left', self.package_20).member_id

    def codes(self, **kwargs):
        return sorted(v.code for v in check_tree_integrity(**kwargs))

    def test_consistent_tree(self):
        self.assertEqual(check_tree_integrity(verify_metrics=True), [])

    def test_cleared_child_pointer(self):
        TreeNode.objects.filter(pk=self.b).update(left_child=None)
        violations = check_tree_integrity()
        self.assertEqual([(v.code, v.member_id) for v in violations], [('orphan', self.d)])

    def test_child_pointer_to_wrong_member(self):
        TreeNode.objects.filter(pk=self.c).update(right_child=self.d)
        self.assertIn('dangling_child', self.codes())

    def test_side_mismatch(self):
        TreeNode.objects.filter(pk=self.d).update(side='right')
        self.assertEqual(self.codes(), ['side_mismatch'])

    def test_cycle(self):
        TreeNode.objects.filter(pk=self.root_id).update(parent=self.d, side='left')
        codes = self.codes(verify_metrics=True)
        self.assertIn('no_root', codes)
        self.assertIn('cycle', codes)
        self.assertNotIn('metric_subtree', codes)

    def test_missing_metrics(self):
        MetricRecord.objects.filter(pk=self.c).delete()
        self.assertEqual(self.codes(), ['missing_metrics'])

    def test_total_mismatch(self):
        MetricRecord.objects.filter(pk=self.root_id).update(total_pv=Decimal('1'))
        self.assertEqual(self.codes(), ['metric_total'])

    def test_subtree_sum_mismatch(self):
        MetricRecord.objects.filter(pk=self.b).update(left_pv=Decimal('5'), total_pv=Decimal('5'))
        self.assertEqual(self.codes(), [])
        self.assertEqual(self.codes(verify_metrics=True), ['metric_subtree'])

    def test_subtree_check_skipped_with_depth_cap(self):
        settings = PlatformSettings.get_settings()
        settings.binary_propagation_depth_cap = 1
        settings.save()
        MetricRecord.objects.filter(pk=self.b).update(left_pv=Decimal('5'), total_pv=Decimal('5'))

        self.assertEqual(self.codes(verify_metrics=True), [])

    def test_violations_logged(self):
        MetricRecord.objects.filter(pk=self.c).delete()
        with self.assertLogs('core.binary.integrity', level='ERROR'):
            check_tree_integrity()


class CheckTreeCommandTest(TreeFixtureMixin, TestCase):

    def test_clean_tree(self):
        self.place('B', self.root_id, 'left')
        out = StringIO()
        call_command('check_tree', '--verify-metrics', stdout=out)
        self.assertIn('No violations found', out.getvalue())

    def test_violations_fail_command(self):
        b = self.place('B', self.root_id, 'left').member_id
        MetricRecord.objects.filter(pk=b).delete()

        out = StringIO()
        with self.assertRaises(CommandError):
            call_command('check_tree', stdout=out)
        self.assertIn('missing_metrics', out.getvalue())


class AuditTaskTest(TreeFixtureMixin, TestCase):

    def test_returns_violation_count(self):
        self.assertEqual(audit_tree_integrity(), 0)

        MetricRecord.objects.filter(pk=self.root_id).update(total_bv=Decimal('9'))
        self.assertEqual(audit_tree_integrity(), 1)

    @patch('core.binary.tasks.check_tree_integrity', return_value=[])
    def test_passes_verify_flag(self, mock_check):
        audit_tree_integrity(verify_metrics=True)
        mock_check.assert_called_once_with(verify_metrics=True)
