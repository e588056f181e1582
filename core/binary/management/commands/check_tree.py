from django.core.management.base import BaseCommand, CommandError
from core.binary.integrity import check_tree_integrity
from core.binary.models import TreeNode


class Command(BaseCommand):
    help = 'Audit the binary tree for broken pointers, cycles and inconsistent metrics'

    def add_arguments(self, parser):
        parser.add_argument(
            '--verify-metrics',
            action='store_true',
            help='Also compare every leg accumulator with the PV/BV placed in that leg (slow on large trees)',
        )

    def handle(self, *args, **options):
        violations = check_tree_integrity(verify_metrics=options['verify_metrics'])

        self.stdout.write("=" * 80)
        self.stdout.write(self.style.SUCCESS("BINARY TREE INTEGRITY CHECK"))
        self.stdout.write("=" * 80)
        self.stdout.write(f"Nodes checked: {TreeNode.objects.count()}")

        if not violations:
            self.stdout.write(self.style.SUCCESS("No violations found"))
            return

        for violation in violations:
            self.stdout.write(self.style.ERROR(f"  {violation}"))

        raise CommandError(f"Found {len(violations)} violation(s)")
