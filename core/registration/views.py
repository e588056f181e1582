from dataclasses import asdict
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from core.binary.exceptions import (
    DuplicateMemberError, InvalidReferenceError, InvalidSideError, NotFoundError,
    ParentNotFoundError, PositionTakenError, SlotSearchExhausted,
)
from core.binary.serializers import PlacementResultSerializer
from .serializers import RegistrationSerializer
from .services import RegistrationError, register_member


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def register(request):
    """
    Register a new member under a sponsor and place them in the binary tree.
    The logged-in member is recorded as the registrant.
    """
    serializer = RegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = dict(serializer.validated_data)
    data['registered_by'] = request.user.username

    try:
        result = register_member(data)
    except RegistrationError as e:
        return Response({'error': str(e), 'errors': e.errors}, status=status.HTTP_400_BAD_REQUEST)
    except (PositionTakenError, DuplicateMemberError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    except (ParentNotFoundError, NotFoundError) as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvalidReferenceError, InvalidSideError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except SlotSearchExhausted as e:
        return Response({'error': str(e)}, status=status.HTTP_422_UNPROCESSABLE_ENTITY)

    return Response(PlacementResultSerializer(asdict(result)).data, status=status.HTTP_201_CREATED)
