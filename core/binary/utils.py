import logging
from dataclasses import dataclass
from decimal import Decimal
from django.db import IntegrityError, OperationalError, transaction
from django.db.models import F
from core.countries.models import Country, Region
from core.members.models import Member
from core.packages.models import Package
from core.settings.models import PlatformSettings
from .exceptions import (
    DuplicateMemberError, InvalidReferenceError, InvalidSideError, NotFoundError,
    ParentNotFoundError, PositionTakenError, RootExistsError, SlotSearchExhausted,
    TreeIntegrityError,
)
from .models import SIDES, MetricRecord, TreeNode

logger = logging.getLogger(__name__)

UNIQUE_MEMBER_FIELDS = ('username', 'email', 'phone')


@dataclass
class PlacementResult:
    member_id: int
    assigned_parent_id: int
    assigned_side: str
    resulting_metrics: dict


def validate_side(side):
    """Return side unchanged if it is 'left' or 'right', raise InvalidSideError otherwise"""
    if side not in SIDES:
        raise InvalidSideError(side)
    return side


def resolve_references(registration, required=True):
    """
    Look up country, region, package and sponsor named in a registration payload

    Every referenced row must exist and be active; the region must belong to the
    country. With required=False, missing ids are allowed (used for the root member).

    Args:
        registration: dict with country_id, region_id, package_id and optional sponsor_username
        required: whether country, region and package must be present

    Returns:
        tuple: (country, region, package, sponsor), any of which may be None when not required

    Raises:
        InvalidReferenceError: if a reference is missing, unknown or inactive
    """
    country = _get_active(Country, 'country_id', registration.get('country_id'), required)
    region = _get_active(Region, 'region_id', registration.get('region_id'), required)
    package = _get_active(Package, 'package_id', registration.get('package_id'), required)

    if region is not None and (country is None or region.country_id != country.pk):
        raise InvalidReferenceError('region_id', region.pk, 'region does not belong to the selected country')

    sponsor = None
    sponsor_username = registration.get('sponsor_username')
    if sponsor_username:
        sponsor = Member.objects.filter(username=sponsor_username).first()
        if sponsor is None:
            raise InvalidReferenceError('sponsor_username', sponsor_username)

    return country, region, package, sponsor


def _get_active(model, field, pk, required):
    if pk is None:
        if required:
            raise InvalidReferenceError(field, pk, 'required')
        return None

    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise InvalidReferenceError(field, pk)
    if not obj.is_active:
        raise InvalidReferenceError(field, pk, 'not active')
    return obj


def _create_member(registration, country, region, package, sponsor):
    total_amount = Decimal('0')
    if package is not None and country is not None:
        total_amount = package.price_for(country) or Decimal('0')

    return Member.objects.create_member(
        username=registration['username'],
        password_hash=registration.get('password_hash'),
        first_name=registration.get('first_name', ''),
        last_name=registration.get('last_name', ''),
        email=registration.get('email') or None,
        phone=registration.get('phone') or None,
        sponsor=sponsor,
        country=country,
        region=region,
        package=package,
        transaction_pin_hash=registration.get('pin_hash') or '',
        total_amount=total_amount,
        registered_by=registration.get('registered_by') or '',
    )


def _insert_member(registration, country, region, package, sponsor):
    """Create the member row, reporting a unique clash by the column that clashed"""
    try:
        # Savepoint keeps the enclosing transaction usable for the lookup below
        with transaction.atomic():
            return _create_member(registration, country, region, package, sponsor)
    except IntegrityError as e:
        for field in UNIQUE_MEMBER_FIELDS:
            value = registration.get(field)
            if value and Member.objects.filter(**{field: value}).exists():
                raise DuplicateMemberError(value, field) from e
        raise


def _slot_taken(parent_id, side):
    return TreeNode.objects.filter(pk=parent_id, **{f'{side}_child__isnull': False}).exists()


def create_root_member(registration):
    """
    Create the single root of the binary tree (the company account)

    Args:
        registration: registration payload; country, region and package are optional

    Returns:
        TreeNode: the root node

    Raises:
        RootExistsError: if the tree already has a root
        DuplicateMemberError: if the username is taken
        InvalidReferenceError: if a given reference is unknown or inactive
    """
    username = registration['username']

    with transaction.atomic():
        existing_root = TreeNode.objects.filter(parent__isnull=True).first()
        if existing_root:
            raise RootExistsError(existing_root.pk)

        country, region, package, sponsor = resolve_references(registration, required=False)
        if Member.objects.filter(username=username).exists():
            raise DuplicateMemberError(username)

        member = _insert_member(registration, country, region, package, sponsor)
        node = TreeNode.objects.create(member=member, parent=None, side=None, level=0)
        MetricRecord.objects.create(
            member=member,
            personal_pv=package.pv if package else 0,
            personal_bv=package.bv if package else 0,
        )

    logger.info(f"Created tree root {member.username} (member {member.pk})")
    return node


def place_member(registration, parent_id, side):
    """
    Register a new member and place them in the given slot of the binary tree

    Everything happens in one transaction: the member row, the tree node, the
    parent's child pointer, the metric record and the PV/BV propagation to the
    ancestors. Any failure rolls all of it back.

    The parent row is locked with select_for_update so placements under the same
    parent are serialized. The (parent, side) unique constraint and the
    conditional child-pointer update make sure only one placement can ever take
    a slot, even where the database cannot lock rows. Where the database instead
    rejects the losing writer with a lock error (SQLite), the slot is re-read
    after the rollback and a taken slot is reported as PositionTakenError.

    Args:
        registration: validated registration payload (username, names, contacts,
            country_id, region_id, package_id, sponsor_username, password_hash, pin_hash)
        parent_id: member id of the placement parent
        side: 'left' or 'right'

    Returns:
        PlacementResult: new member id, parent id, side and the parent's metrics after propagation

    Raises:
        InvalidSideError, ParentNotFoundError, PositionTakenError,
        InvalidReferenceError, DuplicateMemberError, TreeIntegrityError
    """
    validate_side(side)

    try:
        return _place_in_slot(registration, parent_id, side)
    except OperationalError as e:
        if _slot_taken(parent_id, side):
            logger.warning(
                f"Placement of {registration['username']} lost the {side} slot "
                f"of member {parent_id} to a concurrent writer: {e}"
            )
            raise PositionTakenError(parent_id, side) from e
        raise


def _place_in_slot(registration, parent_id, side):
    username = registration['username']

    with transaction.atomic():
        # Lock the parent row; a competing placement waits here and then sees the taken slot
        parent = TreeNode.objects.select_for_update().filter(pk=parent_id).first()
        if parent is None:
            raise ParentNotFoundError(parent_id)

        if parent.child_id(side) is not None:
            raise PositionTakenError(parent_id, side)

        country, region, package, sponsor = resolve_references(registration)

        if Member.objects.filter(username=username).exists():
            raise DuplicateMemberError(username)

        member = _insert_member(registration, country, region, package, sponsor)

        try:
            node = TreeNode.objects.create(
                member=member,
                parent=parent,
                side=side,
                level=parent.level + 1,
            )
        except IntegrityError as e:
            # unique_parent_side: another placement committed this slot first
            raise PositionTakenError(parent_id, side) from e

        # First and only write to this slot: match only while it is still empty
        claimed = TreeNode.objects.filter(
            pk=parent.pk,
            **{f'{side}_child__isnull': True}
        ).update(**{f'{side}_child': node})
        if claimed != 1:
            raise PositionTakenError(parent_id, side)

        MetricRecord.objects.create(
            member=member,
            personal_pv=package.pv,
            personal_bv=package.bv,
        )

        depth_cap = PlatformSettings.get_settings().binary_propagation_depth_cap
        hops = propagate_metrics(parent.pk, side, package.pv, package.bv, depth_cap=depth_cap)

        parent_metrics = MetricRecord.objects.get(pk=parent.pk)

    logger.info(
        f"Placed {member.username} (member {member.pk}) on the {side} of member {parent.pk}; "
        f"{package.pv} PV / {package.bv} BV propagated to {hops} ancestor(s)"
    )

    return PlacementResult(
        member_id=member.pk,
        assigned_parent_id=parent.pk,
        assigned_side=side,
        resulting_metrics=parent_metrics.as_dict(),
    )


def propagate_metrics(from_member_id, side, delta_pv, delta_bv, depth_cap=None):
    """
    Add PV/BV to every ancestor on the path from from_member_id up to the root

    The first hop credits from_member_id's `side` accumulators. Every later hop
    credits the side of the parent that the previous member actually occupies,
    read from the parent's child pointers.

    Must run inside the placement transaction. Increments are done with F()
    expressions so concurrent placements sharing ancestors never lose updates.

    Args:
        from_member_id: first member to credit (the placement parent)
        side: side of from_member_id the value came in on
        delta_pv: PV to add
        delta_bv: BV to add
        depth_cap: maximum number of members to credit, None for no limit

    Returns:
        int: number of members credited

    Raises:
        TreeIntegrityError: if a member on the path has no metric record or tree row,
            or a parent does not point back at its child
    """
    validate_side(side)

    current_id = from_member_id
    current_side = side
    hops = 0

    while current_id is not None:
        if depth_cap is not None and hops >= depth_cap:
            break

        updated = MetricRecord.objects.filter(pk=current_id).update(**{
            f'{current_side}_pv': F(f'{current_side}_pv') + delta_pv,
            'total_pv': F('total_pv') + delta_pv,
            f'{current_side}_bv': F(f'{current_side}_bv') + delta_bv,
            'total_bv': F('total_bv') + delta_bv,
        })
        if updated != 1:
            raise TreeIntegrityError(f"Member {current_id} has no metric record")
        hops += 1

        node = TreeNode.objects.select_related('parent').filter(pk=current_id).first()
        if node is None:
            raise TreeIntegrityError(f"Member {current_id} has no tree node")
        if node.parent is None:
            break

        # Next hop side comes from the parent's child pointers, not from the side passed in
        current_side = node.parent.slot_of(node.pk)
        if current_side is None:
            raise TreeIntegrityError(
                f"Member {node.parent.pk} does not point back at its child {node.pk}"
            )
        current_id = node.parent.pk

    return hops


def find_open_slot(start_member_id, side, max_depth=None):
    """
    Find the shallowest member on the `side` chain below start_member_id whose `side` slot is open

    Follows start -> start's side child -> that child's side child ... and returns
    the first member in the chain with an empty `side` slot. Members more than
    max_depth levels below the start are not examined.

    Args:
        start_member_id: member to start from (depth 0)
        side: 'left' or 'right'
        max_depth: deepest level to examine, defaults to PlatformSettings.binary_slot_search_max_depth

    Returns:
        int: member id of the eligible parent

    Raises:
        NotFoundError: if start_member_id has no tree node
        SlotSearchExhausted: if no open slot exists within max_depth levels
    """
    validate_side(side)
    if max_depth is None:
        max_depth = PlatformSettings.get_settings().binary_slot_search_max_depth

    current = TreeNode.objects.filter(pk=start_member_id).first()
    if current is None:
        raise NotFoundError(start_member_id)

    depth = 0
    while True:
        child_id = current.child_id(side)
        if child_id is None:
            return current.pk

        if depth >= max_depth:
            raise SlotSearchExhausted(start_member_id, side, max_depth)

        current = TreeNode.objects.filter(pk=child_id).first()
        if current is None:
            raise TreeIntegrityError(f"Member {child_id} is referenced as a child but has no tree node")
        depth += 1
