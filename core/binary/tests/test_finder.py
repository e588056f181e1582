from django.test import TestCase
from core.binary.exceptions import InvalidSideError, NotFoundError, SlotSearchExhausted
from core.binary.utils import find_open_slot
from core.settings.models import PlatformSettings
from .helpers import TreeFixtureMixin


class FindOpenSlotTest(TreeFixtureMixin, TestCase):

    def test_start_slot_open(self):
        self.assertEqual(find_open_slot(self.root_id, 'left'), self.root_id)

    def test_walks_down_one_side(self):
        ids = self.place_chain('L', 3, 'left')
        self.assertEqual(find_open_slot(self.root_id, 'left'), ids[-1])
        # Right slots along the chain are ignored
        self.assertEqual(find_open_slot(self.root_id, 'right'), self.root_id)

    def test_returns_shallowest(self):
        ids = self.place_chain('L', 2, 'left')
        x = self.place('X', ids[0], 'right').member_id
        y = self.place('Y', x, 'right').member_id

        self.assertEqual(find_open_slot(ids[0], 'right'), y)
        self.assertEqual(find_open_slot(x, 'left'), x)
        self.assertEqual(find_open_slot(ids[0], 'left'), ids[1])

    def test_max_depth(self):
        ids = self.place_chain('L', 3, 'left')

        self.assertEqual(find_open_slot(self.root_id, 'left', max_depth=3), ids[2])
        with self.assertRaises(SlotSearchExhausted) as ctx:
            find_open_slot(self.root_id, 'left', max_depth=2)
        self.assertEqual(ctx.exception.max_depth, 2)

    def test_max_depth_from_settings(self):
        self.place_chain('L', 2, 'left')
        settings = PlatformSettings.get_settings()
        settings.binary_slot_search_max_depth = 1
        settings.save()

        with self.assertRaises(SlotSearchExhausted):
            find_open_slot(self.root_id, 'left')

    def test_unknown_start(self):
        with self.assertRaises(NotFoundError):
            find_open_slot(999999, 'left')

    def test_invalid_side(self):
        with self.assertRaises(InvalidSideError):
            find_open_slot(self.root_id, 'up')
