"""
Audit of the stored binary tree against its structural and metric invariants.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from core.settings.models import PlatformSettings
from .models import SIDES, MetricRecord, TreeNode

logger = logging.getLogger(__name__)


@dataclass
class Violation:
    code: str
    member_id: int
    detail: str

    def __str__(self):
        return f"[{self.code}] member {self.member_id}: {self.detail}"


def _load_nodes():
    fields = ('member_id', 'parent_id', 'side', 'left_child_id', 'right_child_id')
    return {values[0]: dict(zip(fields, values)) for values in TreeNode.objects.values_list(*fields)}


def _check_structure(nodes):
    violations = []

    roots = [member_id for member_id, node in nodes.items() if node['parent_id'] is None]
    if nodes and not roots:
        violations.append(Violation('no_root', 0, "tree has nodes but no root"))
    if len(roots) > 1:
        for member_id in sorted(roots)[1:]:
            violations.append(Violation('multiple_roots', member_id, f"second root besides member {min(roots)}"))

    for member_id, node in nodes.items():
        parent_id = node['parent_id']
        if parent_id is not None:
            parent = nodes.get(parent_id)
            if parent is None:
                violations.append(Violation('dangling_parent', member_id, f"parent {parent_id} has no tree node"))
            elif parent.get(f"{node['side']}_child_id") != member_id:
                if member_id in (parent['left_child_id'], parent['right_child_id']):
                    violations.append(Violation(
                        'side_mismatch', member_id,
                        f"side is {node['side']!r} but parent {parent_id} holds it on the other side"
                    ))
                else:
                    violations.append(Violation('orphan', member_id, f"parent {parent_id} does not point at it"))

        for side in SIDES:
            child_id = node[f'{side}_child_id']
            if child_id is None:
                continue
            child = nodes.get(child_id)
            if child is None or child['parent_id'] != member_id:
                violations.append(Violation(
                    'dangling_child', member_id,
                    f"{side} child {child_id} does not point back at it"
                ))

    violations.extend(_check_cycles(nodes))
    return violations


def _check_cycles(nodes):
    """Every parent chain must reach a root within len(nodes) steps"""
    violations = []
    # member_id -> 'root', 'dangling' (chain ends at a missing parent) or 'cycle'
    chain_end = {}

    for start_id in nodes:
        path = []
        seen = set()
        current_id = start_id
        while True:
            if current_id in chain_end:
                result = chain_end[current_id]
                break
            if current_id not in nodes:
                result = 'dangling'
                break
            if current_id in seen:
                result = 'cycle'
                break
            seen.add(current_id)
            path.append(current_id)
            parent_id = nodes[current_id]['parent_id']
            if parent_id is None:
                result = 'root'
                break
            current_id = parent_id

        for member_id in path:
            chain_end[member_id] = result
        if result == 'cycle':
            violations.append(Violation('cycle', start_id, "parent chain never reaches the root"))

    return violations


def _check_metrics(nodes, verify_subtrees):
    violations = []
    metrics = {record.member_id: record for record in MetricRecord.objects.all()}

    for member_id in nodes:
        record = metrics.get(member_id)
        if record is None:
            violations.append(Violation('missing_metrics', member_id, "no metric record"))
            continue
        for unit in ('pv', 'bv'):
            left = getattr(record, f'left_{unit}')
            right = getattr(record, f'right_{unit}')
            total = getattr(record, f'total_{unit}')
            if left + right != total:
                violations.append(Violation(
                    'metric_total', member_id,
                    f"total_{unit} {total} != left {left} + right {right}"
                ))

    if verify_subtrees:
        violations.extend(_check_subtree_sums(nodes, metrics))
    return violations


def _check_subtree_sums(nodes, metrics):
    """Compare each leg accumulator with the personal values stored in that leg"""
    violations = []
    children = defaultdict(list)
    for member_id, node in nodes.items():
        if node['parent_id'] is not None:
            children[node['parent_id']].append(member_id)

    subtree_sums = {}

    def subtree_sum(root_id, unit):
        # Iterative post-order; deep trees would overflow the recursion limit
        key = (root_id, unit)
        if key in subtree_sums:
            return subtree_sums[key]
        stack = [(root_id, False)]
        while stack:
            member_id, expanded = stack.pop()
            if (member_id, unit) in subtree_sums:
                continue
            if not expanded:
                stack.append((member_id, True))
                stack.extend((child_id, False) for child_id in children[member_id]
                             if (child_id, unit) not in subtree_sums)
                continue
            record = metrics.get(member_id)
            value = getattr(record, f'personal_{unit}') if record else Decimal('0')
            value += sum(subtree_sums.get((child_id, unit), Decimal('0')) for child_id in children[member_id])
            subtree_sums[(member_id, unit)] = value
        return subtree_sums[key]

    for member_id, node in nodes.items():
        record = metrics.get(member_id)
        if record is None:
            continue
        for side in SIDES:
            child_id = node[f'{side}_child_id']
            for unit in ('pv', 'bv'):
                expected = subtree_sum(child_id, unit) if child_id in nodes else Decimal('0')
                actual = getattr(record, f'{side}_{unit}')
                if actual != expected:
                    violations.append(Violation(
                        'metric_subtree', member_id,
                        f"{side}_{unit} {actual} != {expected} placed in that leg"
                    ))
    return violations


def check_tree_integrity(verify_metrics=False):
    """
    Audit the whole stored tree

    Args:
        verify_metrics: also compare each leg accumulator with the sum of personal
            PV/BV placed in that leg. Skipped when a propagation depth cap is set,
            since capped trees legitimately differ.

    Returns:
        list: Violation objects, empty when the tree is consistent
    """
    nodes = _load_nodes()
    violations = _check_structure(nodes)

    verify_subtrees = verify_metrics
    if verify_metrics and PlatformSettings.get_settings().binary_propagation_depth_cap is not None:
        logger.info("Propagation depth cap is set, skipping subtree metric verification")
        verify_subtrees = False
    # Cycles make subtree sums meaningless
    if any(v.code == 'cycle' for v in violations):
        verify_subtrees = False

    violations.extend(_check_metrics(nodes, verify_subtrees))

    if violations:
        for violation in violations:
            logger.error(f"Tree integrity violation {violation}")
    else:
        logger.info(f"Tree integrity check passed for {len(nodes)} node(s)")
    return violations
