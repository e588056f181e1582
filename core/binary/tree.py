"""
Read side of the binary tree: nested subtree and dashboard counters.

The subtree is collected with one recursive CTE over tree_nodes, following the
left/right child pointers without any depth limit. Member attributes and
metrics for the collected ids are then loaded in bulk and the flat rows are
folded into a nested dict in memory.
"""
import logging
from contextlib import contextmanager, nullcontext
from datetime import timedelta
from django.db import DatabaseError, connection, transaction
from django.utils import timezone
from core.members.models import Member
from core.settings.models import PlatformSettings
from .exceptions import NotFoundError
from .models import SIDES, TreeNode

logger = logging.getLogger(__name__)

# Keeps IN (...) lists under SQLite's bound-parameter limit
MEMBER_FETCH_CHUNK = 500

# Databases whose transactions give a consistent multi-statement read
SNAPSHOT_VENDORS = ('postgresql', 'mysql')

SUBTREE_SQL = """
    WITH RECURSIVE subtree AS (
        SELECT member_id, parent_id, left_child_id, right_child_id, 0 AS depth
        FROM tree_nodes WHERE member_id = %s
        UNION ALL
        SELECT t.member_id, t.parent_id, t.left_child_id, t.right_child_id, s.depth + 1
        FROM tree_nodes t
        INNER JOIN subtree s ON t.member_id = s.left_child_id OR t.member_id = s.right_child_id
        WHERE s.depth < %s
    )
    SELECT member_id, parent_id, left_child_id, right_child_id, depth
    FROM subtree
    ORDER BY depth, member_id
"""

ANCESTORS_SQL = """
    WITH RECURSIVE ancestors AS (
        SELECT member_id, parent_id, 0 AS depth
        FROM tree_nodes WHERE member_id = %s
        UNION ALL
        SELECT t.member_id, t.parent_id, a.depth + 1
        FROM tree_nodes t
        INNER JOIN ancestors a ON t.member_id = a.parent_id
        WHERE a.depth < %s AND a.parent_id IS NOT NULL
    )
    SELECT member_id FROM ancestors WHERE member_id = %s
"""


def _row_dict(member_id, parent_id, left_child_id, right_child_id, depth):
    return {
        'member_id': member_id,
        'parent_id': parent_id,
        'left_child_id': left_child_id,
        'right_child_id': right_child_id,
        'depth': depth,
    }


def _fetch_rows_cte(root_member_id, depth_limit):
    with connection.cursor() as cursor:
        cursor.execute(SUBTREE_SQL, [root_member_id, depth_limit])
        return [_row_dict(*row) for row in cursor.fetchall()]


def _fetch_rows_by_level(root_member_id, depth_limit):
    """Breadth-first fallback: one query per level"""
    fields = ('member_id', 'parent_id', 'left_child_id', 'right_child_id')
    rows = []
    frontier = list(TreeNode.objects.filter(pk=root_member_id).values_list(*fields))
    depth = 0

    while frontier and depth <= depth_limit:
        level_rows = sorted((_row_dict(*values, depth) for values in frontier), key=lambda r: r['member_id'])
        rows.extend(level_rows)

        child_ids = []
        for row in level_rows:
            child_ids.extend(cid for cid in (row['left_child_id'], row['right_child_id']) if cid is not None)
        if not child_ids:
            break

        frontier = list(TreeNode.objects.filter(pk__in=child_ids).values_list(*fields))
        depth += 1

    return rows


def fetch_subtree_rows(root_member_id):
    """
    Flat rows for root_member_id and every descendant, ordered by depth then member id

    Each row has member_id, parent_id, left_child_id, right_child_id and depth
    (relative to root_member_id). Uses a recursive CTE and falls back to a
    level-by-level fetch if the database rejects it.

    Returns:
        list: rows as dicts, empty if root_member_id has no tree node
    """
    # No valid subtree is deeper than the number of nodes; stops a corrupted cycle
    depth_limit = TreeNode.objects.count()

    # Savepoint so a rejected CTE does not abort an enclosing transaction
    savepoint = transaction.atomic() if connection.in_atomic_block else nullcontext()
    try:
        with savepoint:
            return _fetch_rows_cte(root_member_id, depth_limit)
    except DatabaseError as e:
        logger.warning(f"Subtree CTE query failed for member {root_member_id}, using level-by-level fallback: {str(e)}")
        return _fetch_rows_by_level(root_member_id, depth_limit)


def load_members(member_ids):
    """Members with sponsor, package and metrics, keyed by id"""
    members = {}
    member_ids = list(member_ids)
    for start in range(0, len(member_ids), MEMBER_FETCH_CHUNK):
        chunk = member_ids[start:start + MEMBER_FETCH_CHUNK]
        queryset = Member.objects.filter(pk__in=chunk).select_related('sponsor', 'package', 'metrics')
        for member in queryset:
            members[member.pk] = member
    return members


def _metric_value(metrics, field):
    if metrics is None:
        return 0
    return getattr(metrics, field)


def _node_payload(row, member):
    metrics = getattr(member, 'metrics', None)
    return {
        'id': member.pk,
        'username': member.username,
        'first_name': member.first_name,
        'last_name': member.last_name,
        'sponsor_username': member.sponsor.username if member.sponsor else None,
        'email': member.email,
        'phone': member.phone,
        'status': member.status,
        'package': member.package.name if member.package else None,
        'level': row['depth'],
        'pv_data': {
            'left_pv': _metric_value(metrics, 'left_pv'),
            'right_pv': _metric_value(metrics, 'right_pv'),
            'total_pv': _metric_value(metrics, 'total_pv'),
        },
        'bv_data': {
            'left_bv': _metric_value(metrics, 'left_bv'),
            'right_bv': _metric_value(metrics, 'right_bv'),
            'total_bv': _metric_value(metrics, 'total_bv'),
        },
        'children': {
            'left': None,
            'right': None,
        },
    }


def build_tree_from_rows(rows, members, root_member_id):
    """
    Fold flat subtree rows into a nested dict anchored at root_member_id

    First pass builds an id -> node lookup, second pass wires each node's
    left/right children from the child ids carried on its row.
    """
    nodes = {}
    for row in rows:
        member = members.get(row['member_id'])
        if member is None:
            continue
        nodes[row['member_id']] = _node_payload(row, member)

    for row in rows:
        parent_node = nodes.get(row['member_id'])
        if parent_node is None:
            continue
        for side in SIDES:
            child_id = row[f'{side}_child_id']
            if child_id is not None and child_id in nodes:
                parent_node['children'][side] = nodes[child_id]

    return nodes.get(root_member_id)


def _stats_from_rows(rows, members, root_member_id, now=None):
    now = now or timezone.now()
    window_days = PlatformSettings.get_settings().new_member_window_days
    window_start = now - timedelta(days=window_days)

    descendant_ids = [row['member_id'] for row in rows if row['depth'] > 0]
    this_week = sum(
        1 for member_id in descendant_ids
        if member_id in members and members[member_id].created_at >= window_start
    )

    root = members.get(root_member_id)
    root_metrics = getattr(root, 'metrics', None) if root else None

    return {
        'left_leg': {
            'pv': _metric_value(root_metrics, 'left_pv'),
            'bv': _metric_value(root_metrics, 'left_bv'),
        },
        'right_leg': {
            'pv': _metric_value(root_metrics, 'right_pv'),
            'bv': _metric_value(root_metrics, 'right_bv'),
        },
        'team_members': {
            'count': len(descendant_ids),
            'this_week': this_week,
        },
        # Every descendant counts as a pair
        'total_pairs': {
            'count': len(descendant_ids),
            'this_week': this_week,
        },
    }


@contextmanager
def read_snapshot():
    """
    Run the subtree and member reads against one database snapshot

    Without it a placement committing between the two reads can leave its PV
    in an ancestor's metrics while the new node is missing from the rows.
    PostgreSQL gets a REPEATABLE READ transaction; MySQL/InnoDB already reads
    from one snapshot per transaction. Inside a caller's transaction the
    caller's isolation applies. SQLite reads stay in autocommit, since its
    IMMEDIATE transactions would take the write lock for a read.
    """
    if connection.vendor not in SNAPSHOT_VENDORS or connection.in_atomic_block:
        yield
        return

    with transaction.atomic():
        if connection.vendor == 'postgresql':
            with connection.cursor() as cursor:
                cursor.execute('SET TRANSACTION ISOLATION LEVEL REPEATABLE READ')
        yield


def _load(root_member_id):
    with read_snapshot():
        rows = fetch_subtree_rows(root_member_id)
        if not rows:
            raise NotFoundError(root_member_id)
        members = load_members(row['member_id'] for row in rows)
    return rows, members


def read_subtree(root_member_id):
    """
    Complete nested subtree below root_member_id, no depth limit

    Raises:
        NotFoundError: if root_member_id has no tree node
    """
    rows, members = _load(root_member_id)
    return build_tree_from_rows(rows, members, root_member_id)


def read_stats(root_member_id, now=None):
    """
    Dashboard counters for root_member_id

    Leg PV/BV are read from the root's metric record. Team member and pair
    counts cover descendants only; this_week counts those created within the
    last new_member_window_days days.

    Raises:
        NotFoundError: if root_member_id has no tree node
    """
    rows, members = _load(root_member_id)
    return _stats_from_rows(rows, members, root_member_id, now=now)


def get_binary_tree_with_stats(root_member_id, now=None):
    """Nested tree and stats from a single subtree fetch"""
    rows, members = _load(root_member_id)
    return {
        'data': build_tree_from_rows(rows, members, root_member_id),
        'stats': _stats_from_rows(rows, members, root_member_id, now=now),
    }


def is_in_subtree(owner_member_id, member_id):
    """
    Check whether member_id is owner_member_id or one of its descendants

    Walks the ancestors of member_id with a recursive CTE, falling back to a
    parent-by-parent walk if the CTE fails.
    """
    if owner_member_id == member_id:
        return True

    depth_limit = TreeNode.objects.count()
    try:
        with connection.cursor() as cursor:
            cursor.execute(ANCESTORS_SQL, [member_id, depth_limit, owner_member_id])
            return cursor.fetchone() is not None
    except DatabaseError as e:
        logger.warning(f"Ancestor CTE query failed for member {member_id}, using fallback: {str(e)}")

    current_id = member_id
    depth = 0
    while current_id is not None and depth <= depth_limit:
        if current_id == owner_member_id:
            return True
        current_id = TreeNode.objects.filter(pk=current_id).values_list('parent_id', flat=True).first()
        depth += 1
    return False
