import logging

from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
from rest_framework.views import APIView

from updates.models import Update
from updates.serializers import (
    MessageSerializer,
    UpdateListQuerySerializer,
    UpdateSerializer,
)
from updates.services import (
    change_update,
    create_update,
    delete_update,
    get_update,
    list_updates,
)

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Update not found"

ID_PARAMETER = OpenApiParameter(
    name="pk",
    type=str,
    location=OpenApiParameter.PATH,
    description="Identifier of the update",
)


class UpdateListView(APIView):
    """List and create daily updates."""

    @extend_schema(
        operation_id="list_updates",
        summary="List daily updates",
        description="Return all updates, newest date first. Optional filters narrow the result; there is no pagination.",
        parameters=[UpdateListQuerySerializer],
        responses={
            200: OpenApiResponse(
                response=UpdateSerializer(many=True),
                description="Matching updates ordered by date descending",
            ),
            400: OpenApiResponse(response=MessageSerializer, description="Unparseable filter"),
        },
        tags=["Updates"],
    )
    def get(self, request):
        # Empty query parameters (e.g. ``?date=``) mean "no filter".
        params = {key: value for key, value in request.query_params.items() if value != ""}
        query = UpdateListQuerySerializer(data=params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        entries = list_updates(
            on_date=filters.get("date"),
            start=filters.get("start"),
            end=filters.get("end"),
            employee=filters.get("employee"),
        )
        return Response(UpdateSerializer(entries, many=True).data)

    @extend_schema(
        operation_id="create_update",
        summary="Create a daily update",
        description="Store a new update. issueStatus defaults to N/A when omitted.",
        request=UpdateSerializer,
        responses={
            201: OpenApiResponse(response=UpdateSerializer, description="Update created"),
            400: OpenApiResponse(response=MessageSerializer, description="Validation failed"),
        },
        tags=["Updates"],
    )
    def post(self, request):
        serializer = UpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = create_update(serializer.validated_data)
        return Response(UpdateSerializer(entry).data, status=status.HTTP_201_CREATED)


class UpdateDetailView(APIView):
    """Read, change or remove a single update."""

    def _get_entry(self, pk: str) -> Update:
        try:
            return get_update(pk)
        except Update.DoesNotExist as exc:
            raise NotFound(NOT_FOUND_MESSAGE) from exc

    @extend_schema(
        operation_id="read_update",
        summary="Read a daily update",
        parameters=[ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=UpdateSerializer, description="The update"),
            404: OpenApiResponse(response=MessageSerializer, description="Update not found"),
        },
        tags=["Updates"],
    )
    def get(self, request, pk: str):
        return Response(UpdateSerializer(self._get_entry(pk)).data)

    @extend_schema(
        operation_id="change_update",
        summary="Change a daily update",
        description="Partially replace the update. Only fields present in the body are changed; updatedAt is refreshed.",
        parameters=[ID_PARAMETER],
        request=UpdateSerializer,
        responses={
            200: OpenApiResponse(response=UpdateSerializer, description="The changed update"),
            400: OpenApiResponse(response=MessageSerializer, description="Validation failed"),
            404: OpenApiResponse(response=MessageSerializer, description="Update not found"),
        },
        tags=["Updates"],
    )
    def put(self, request, pk: str):
        entry = self._get_entry(pk)
        serializer = UpdateSerializer(entry, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            entry, _ = change_update(pk, serializer.validated_data)
        except Update.DoesNotExist as exc:
            # Deleted between the lookup and the write.
            raise NotFound(NOT_FOUND_MESSAGE) from exc
        return Response(UpdateSerializer(entry).data)

    @extend_schema(
        operation_id="patch_update",
        summary="Change a daily update",
        parameters=[ID_PARAMETER],
        request=UpdateSerializer,
        responses={
            200: OpenApiResponse(response=UpdateSerializer, description="The changed update"),
            400: OpenApiResponse(response=MessageSerializer, description="Validation failed"),
            404: OpenApiResponse(response=MessageSerializer, description="Update not found"),
        },
        tags=["Updates"],
    )
    def patch(self, request, pk: str):
        return self.put(request, pk)

    @extend_schema(
        operation_id="delete_update",
        summary="Delete a daily update",
        parameters=[ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=MessageSerializer, description="Update deleted"),
            404: OpenApiResponse(response=MessageSerializer, description="Update not found"),
        },
        tags=["Updates"],
    )
    def delete(self, request, pk: str):
        if not delete_update(pk):
            raise NotFound(NOT_FOUND_MESSAGE)
        return Response({"message": "Update deleted successfully"}, status=status.HTTP_200_OK)


class HealthCheckView(APIView):
    """Liveness endpoint."""

    @extend_schema(
        operation_id="health_check",
        summary="Health check",
        responses={200: OpenApiResponse(description="Service is up")},
        tags=["Health & Monitoring"],
    )
    def get(self, request):
        return Response({"status": "ok"}, status=status.HTTP_200_OK)


class PingView(APIView):
    """Keep-alive endpoint for hosts that idle out quiet services."""

    @extend_schema(
        operation_id="ping",
        summary="Ping",
        responses={200: OpenApiResponse(description="Pong with the server timestamp")},
        tags=["Health & Monitoring"],
    )
    def get(self, request):
        now = timezone.now().isoformat()
        logger.info(f"[PING] Hit at {now}")
        return Response({"status": "pong", "timestamp": now}, status=status.HTTP_200_OK)
