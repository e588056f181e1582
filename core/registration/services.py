import logging
from core.binary.exceptions import NotFoundError
from core.binary.utils import find_open_slot, place_member
from core.members.models import Member
from core.settings.models import PlatformSettings

logger = logging.getLogger(__name__)

REGISTRATION_FIELDS = (
    'username', 'sponsor_username', 'first_name', 'last_name', 'email', 'phone',
    'country_id', 'region_id', 'package_id', 'password_hash', 'pin_hash', 'registered_by',
)


class RegistrationError(ValueError):
    """Registration rejected before placement; errors maps field name to message"""

    def __init__(self, errors):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))


def _check_unique(data):
    errors = {}
    if Member.objects.filter(username=data['username']).exists():
        errors['username'] = "Username already registered"
    if data.get('email') and Member.objects.filter(email=data['email']).exists():
        errors['email'] = "Email already registered"
    if data.get('phone') and Member.objects.filter(phone=data['phone']).exists():
        errors['phone'] = "Phone number already registered"
    if errors:
        raise RegistrationError(errors)


def resolve_placement(data, sponsor):
    """
    Work out (parent_id, side) for a registration

    An explicit placement_parent_id or placement_username is used as given.
    Otherwise the shallowest open slot on the requested side below the sponsor
    is used. The side falls back to the platform default.
    """
    side = data.get('placement_side') or PlatformSettings.get_settings().binary_tree_default_placement_side

    if data.get('placement_parent_id'):
        return data['placement_parent_id'], side

    placement_username = data.get('placement_username')
    if placement_username:
        parent_id = Member.objects.filter(username=placement_username).values_list('pk', flat=True).first()
        if parent_id is None:
            raise RegistrationError({'placement_username': "Placement member not found"})
        return parent_id, side

    try:
        return find_open_slot(sponsor.pk, side), side
    except NotFoundError:
        raise RegistrationError({'sponsor_username': "Sponsor is not placed in the binary tree"})


def register_member(data):
    """
    Register a new member and place them in the binary tree

    Args:
        data: validated registration payload (see RegistrationSerializer)

    Returns:
        PlacementResult from place_member

    Raises:
        RegistrationError: duplicate username/email/phone, unknown sponsor or placement member
        PlacementError, SlotSearchExhausted: from the placement engine
    """
    _check_unique(data)

    sponsor = Member.objects.filter(username=data['sponsor_username']).first()
    if sponsor is None:
        raise RegistrationError({'sponsor_username': "Sponsor not found"})

    parent_id, side = resolve_placement(data, sponsor)

    registration = {field: data.get(field) for field in REGISTRATION_FIELDS}
    result = place_member(registration, parent_id, side)

    logger.info(
        f"Registered {data['username']} sponsored by {sponsor.username}, "
        f"placed {side} of member {parent_id}"
    )
    return result
