"""
Errors raised by the binary tree engine.

Placement errors are raised inside the placement transaction, so raising one
rolls back every write made for that placement. Callers map them to
user-facing messages; nothing here is retried automatically.
"""


class TreeError(Exception):
    """Base class for binary tree errors"""


class PlacementError(TreeError):
    """A placement was rejected and nothing was written"""


class DuplicateMemberError(PlacementError):
    """Username, email or phone already belongs to another member"""

    def __init__(self, value, field='username'):
        self.field = field
        self.value = value
        if field == 'username':
            message = f"Member '{value}' is already registered in the tree"
        else:
            message = f"A member with {field} '{value}' is already registered"
        super().__init__(message)


class PositionTakenError(PlacementError):
    def __init__(self, parent_id, side):
        self.parent_id = parent_id
        self.side = side
        super().__init__(f"Position {side} under member {parent_id} is already occupied")


class ParentNotFoundError(PlacementError):
    def __init__(self, parent_id):
        self.parent_id = parent_id
        super().__init__(f"Placement parent {parent_id} is not in the tree")


class InvalidReferenceError(PlacementError):
    """Country, region, package or sponsor is missing or not active"""

    def __init__(self, field, value, reason='not found'):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class RootExistsError(PlacementError):
    def __init__(self, root_id):
        self.root_id = root_id
        super().__init__(f"The tree already has a root (member {root_id})")


class InvalidSideError(TreeError, ValueError):
    def __init__(self, side):
        self.side = side
        super().__init__(f"Invalid side: {side!r}. Must be 'left' or 'right'")


class SlotSearchExhausted(TreeError):
    def __init__(self, start_member_id, side, max_depth):
        self.start_member_id = start_member_id
        self.side = side
        self.max_depth = max_depth
        super().__init__(
            f"No open {side} slot within {max_depth} levels below member {start_member_id}"
        )


class NotFoundError(TreeError):
    def __init__(self, member_id):
        self.member_id = member_id
        super().__init__(f"No tree for member {member_id}")


class TreeIntegrityError(TreeError):
    """Stored tree or metric rows contradict each other"""
