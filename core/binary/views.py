from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from core.settings.models import PlatformSettings
from .exceptions import InvalidSideError, NotFoundError, SlotSearchExhausted, TreeIntegrityError
from .models import TreeNode
from .serializers import OpenSlotQuerySerializer, TreeNodeSerializer
from .tree import get_binary_tree_with_stats, is_in_subtree, read_stats
from .utils import find_open_slot


class BinaryTreeViewSet(viewsets.ViewSet):
    """
    Read-only access to the binary tree.

    Staff can read any member's tree; other members only their own subtree.
    """
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def _can_view(self, user, member_id):
        if user.is_superuser or user.is_staff:
            return True
        if not TreeNode.objects.filter(pk=user.pk).exists():
            return False
        return is_in_subtree(user.pk, member_id)

    def _forbidden(self):
        return Response(
            {'error': 'You can only view members in your own tree'},
            status=status.HTTP_403_FORBIDDEN
        )

    def retrieve(self, request, pk=None):
        """Complete nested tree below the member plus dashboard stats"""
        member_id = int(pk)
        if not self._can_view(request.user, member_id):
            return self._forbidden()
        try:
            return Response(get_binary_tree_with_stats(member_id))
        except NotFoundError:
            return Response({'error': 'No tree for this member'}, status=status.HTTP_404_NOT_FOUND)

    @action(detail=True, methods=['get'])
    def stats(self, request, pk=None):
        member_id = int(pk)
        if not self._can_view(request.user, member_id):
            return self._forbidden()
        try:
            return Response(read_stats(member_id))
        except NotFoundError:
            return Response({'error': 'No tree for this member'}, status=status.HTTP_404_NOT_FOUND)

    @action(detail=True, methods=['get'], url_path='open-slot')
    def open_slot(self, request, pk=None):
        """
        Shallowest open slot on one leg below the member

        Query params:
        - side: 'left' or 'right' (defaults to the platform placement side)
        - max_depth: optional override of the search depth
        """
        member_id = int(pk)
        if not self._can_view(request.user, member_id):
            return self._forbidden()

        query = OpenSlotQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        side = query.validated_data.get('side') or PlatformSettings.get_settings().binary_tree_default_placement_side

        try:
            parent_id = find_open_slot(member_id, side, max_depth=query.validated_data.get('max_depth'))
        except NotFoundError:
            return Response({'error': 'No tree for this member'}, status=status.HTTP_404_NOT_FOUND)
        except InvalidSideError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except SlotSearchExhausted as e:
            return Response({'error': str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        except TreeIntegrityError as e:
            return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({'parent_id': parent_id, 'side': side})

    @action(detail=False, methods=['get'])
    def my_tree(self, request):
        """Current member's own tree row"""
        node = TreeNode.objects.select_related('member', 'member__metrics').filter(pk=request.user.pk).first()
        if node is None:
            return Response({'error': 'No tree for this member'}, status=status.HTTP_404_NOT_FOUND)
        return Response(TreeNodeSerializer(node).data)
