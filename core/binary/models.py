from django.conf import settings
from django.db import models


SIDES = ('left', 'right')
SIDE_CHOICES = [('left', 'Left'), ('right', 'Right')]


class TreeNode(models.Model):
    """
    Member's position in the binary placement tree.

    Keyed by member id. A child pointer, once set, is never overwritten:
    there is no move or demotion operation, nodes are never deleted.
    """
    member = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='tree_node'
    )
    parent = models.ForeignKey('self', on_delete=models.PROTECT, null=True, blank=True, related_name='children')

    # Slot this node occupies on its parent (null for the root)
    side = models.CharField(max_length=5, choices=SIDE_CHOICES, null=True, blank=True)
    left_child = models.OneToOneField('self', on_delete=models.PROTECT, null=True, blank=True, related_name='+')
    right_child = models.OneToOneField('self', on_delete=models.PROTECT, null=True, blank=True, related_name='+')

    # Depth from the root of the whole tree
    level = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tree_nodes'
        verbose_name = 'Tree Node'
        verbose_name_plural = 'Tree Nodes'
        constraints = [
            models.UniqueConstraint(
                fields=['parent', 'side'],
                condition=models.Q(parent__isnull=False),
                name='unique_parent_side'
            )
        ]

    def __str__(self):
        return f"Tree Node - {self.member_id} ({self.side or 'root'})"

    @property
    def is_root(self):
        return self.parent_id is None

    def child_id(self, side):
        """Member id occupying the given slot, or None if the slot is open"""
        return getattr(self, f'{side}_child_id')

    def slot_of(self, member_id):
        """Which of this node's slots holds member_id ('left', 'right' or None)"""
        if self.left_child_id == member_id:
            return 'left'
        if self.right_child_id == member_id:
            return 'right'
        return None


class MetricRecord(models.Model):
    """
    Cumulative PV/BV a member has received from its left and right subtrees.

    The member's own package value is kept in personal_pv/personal_bv and is
    not part of its own accumulators. total_pv == left_pv + right_pv (same for BV).
    """
    member = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='metrics'
    )

    personal_pv = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    personal_bv = models.DecimalField(max_digits=16, decimal_places=2, default=0)

    left_pv = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    right_pv = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    total_pv = models.DecimalField(max_digits=16, decimal_places=2, default=0)

    left_bv = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    right_bv = models.DecimalField(max_digits=16, decimal_places=2, default=0)
    total_bv = models.DecimalField(max_digits=16, decimal_places=2, default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'member_metrics'
        verbose_name = 'Member Metrics'
        verbose_name_plural = 'Member Metrics'

    def __str__(self):
        return f"Metrics - {self.member_id} (L {self.left_pv} / R {self.right_pv} PV)"

    def as_dict(self):
        return {
            'member_id': self.member_id,
            'left_pv': self.left_pv,
            'right_pv': self.right_pv,
            'total_pv': self.total_pv,
            'left_bv': self.left_bv,
            'right_bv': self.right_bv,
            'total_bv': self.total_bv,
        }
