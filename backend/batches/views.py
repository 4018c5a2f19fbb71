from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from batches import models as batch_models
from batches.serializers import (
    BatchDetailSerializer,
    BatchSerializer,
    BatchSessionSerializer,
    BatchWithPeopleSerializer,
    BatchWriteSerializer,
    RescheduleSerializer,
    SessionWriteSerializer,
)
from batches.services import batch_service, report, session_service
from coaching.exceptions import InvalidRequest

SORTABLE_FIELDS = ('name', 'type', 'status', 'start_date', 'end_date', 'capacity', 'created_at', 'member_count')
DEFAULT_PER_PAGE = 10


def _ordering(params) -> list:
    sort_by = params.get('sort_by') or 'created_at'
    sort_order = (params.get('sort_order') or 'desc').lower()
    if sort_by not in SORTABLE_FIELDS:
        raise InvalidRequest(f'Cannot sort by "{sort_by}".', allowed=list(SORTABLE_FIELDS))
    if sort_order not in ('asc', 'desc'):
        raise InvalidRequest('sort_order must be "asc" or "desc".')
    prefix = '-' if sort_order == 'desc' else ''
    return [f'{prefix}{sort_by}', f'{prefix}id']


def _flag(value) -> bool:
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _per_page(value) -> int:
    try:
        per_page = int(value)
    except (TypeError, ValueError):
        raise InvalidRequest('per_page must be a positive integer.')
    if per_page < 1:
        raise InvalidRequest('per_page must be a positive integer.')
    return per_page


def _split_people(validated: dict):
    partners = validated.pop('partner_ids', None)
    members = validated.pop('member_ids', None)
    return partners, members


def _detail(batch_id: int):
    return get_object_or_404(
        batch_models.Batch.objects.prefetch_related('partners', 'sessions'), pk=batch_id,
    )


class BatchListCreateView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        qs = (
            batch_models.Batch.objects
            .prefetch_related('partners')
            .annotate(member_count=Count('members', distinct=True))
        )
        search = (request.query_params.get('search') or '').strip()
        if search:
            qs = qs.filter(
                Q(name__icontains=search)
                | Q(type__icontains=search)
                | Q(status__icontains=search)
                | Q(partners__name__icontains=search)
            ).distinct()
        status_filter = request.query_params.get('status')
        if status_filter:
            qs = qs.filter(status=status_filter)
        qs = qs.order_by(*_ordering(request.query_params))

        if not _flag(request.query_params.get('paginate', '0')):
            return Response({'status': 'success', 'data': BatchSerializer(qs, many=True).data})

        paginator = Paginator(qs, _per_page(request.query_params.get('per_page', DEFAULT_PER_PAGE)))
        page = paginator.get_page(request.query_params.get('page'))
        return Response({
            'status': 'success',
            'data': BatchSerializer(page.object_list, many=True).data,
            'pagination': {
                'page': page.number,
                'per_page': paginator.per_page,
                'total': paginator.count,
                'total_pages': paginator.num_pages,
            },
        })

    def post(self, request, *args, **kwargs):
        serializer = BatchWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        partners, members = _split_people(data)
        batch = batch_service.create_batch(data, partners=partners, members=members, request=request)
        return Response(
            {
                'status': 'success',
                'message': 'Batch created successfully',
                'data': BatchDetailSerializer(_detail(batch.id)).data,
            },
            status=status.HTTP_201_CREATED,
        )


class BatchDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, batch_id: int, *args, **kwargs):
        return Response({'status': 'success', 'data': BatchDetailSerializer(_detail(batch_id)).data})

    def put(self, request, batch_id: int, *args, **kwargs):
        batch = get_object_or_404(batch_models.Batch, pk=batch_id)
        serializer = BatchWriteSerializer(batch, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        partners, members = _split_people(data)
        batch_service.update_batch(batch, data, partners=partners, members=members, request=request)
        return Response({
            'status': 'success',
            'message': 'Batch updated successfully',
            'data': BatchDetailSerializer(_detail(batch_id)).data,
        })

    patch = put

    def delete(self, request, batch_id: int, *args, **kwargs):
        batch = get_object_or_404(batch_models.Batch, pk=batch_id)
        batch_service.delete_batch(batch, request=request)
        return Response({'status': 'success', 'message': 'Batch deleted successfully'})


class BatchesWithPeopleView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        serializer = BatchWithPeopleSerializer(batch_service.batches_with_people(), many=True)
        return Response({
            'message': 'Batches with members and partners retrieved successfully.',
            'data': serializer.data,
        })


class BatchSessionsView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, batch_id: int, *args, **kwargs):
        batch = get_object_or_404(batch_models.Batch, pk=batch_id)
        sessions = batch.sessions.order_by('date', 'start_time', 'id')
        return Response({
            'status': 'success',
            'data': {
                'batch': {'id': batch.id, 'name': batch.name, 'status': batch.status},
                'sessions': BatchSessionSerializer(sessions, many=True).data,
            },
        })


class BatchReportView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, batch_id: int, *args, **kwargs):
        batch = get_object_or_404(batch_models.Batch, pk=batch_id)
        return Response({'status': 'success', 'data': report.batch_report(batch)})


class BatchesSummaryView(APIView):
    permission_classes = (IsAuthenticated,)

    def get(self, request, *args, **kwargs):
        return Response({'status': 'success', 'data': report.batches_summary()})


class SessionCreateView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, *args, **kwargs):
        serializer = SessionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        batch = data.pop('batch')
        session = session_service.create_session(batch, data, request=request)
        return Response(
            {
                'status': 'success',
                'message': 'Session created successfully',
                'data': BatchSessionSerializer(session).data,
            },
            status=status.HTTP_201_CREATED,
        )


class SessionDetailView(APIView):
    permission_classes = (IsAuthenticated,)

    def put(self, request, session_id: int, *args, **kwargs):
        session = get_object_or_404(batch_models.BatchSession.objects.select_related('batch'), pk=session_id)
        serializer = SessionWriteSerializer(session, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        # sessions never move between batches
        data.pop('batch', None)
        session = session_service.update_session(session, data, request=request)
        return Response({
            'status': 'success',
            'message': 'Session updated successfully',
            'data': BatchSessionSerializer(session).data,
        })

    patch = put

    def delete(self, request, session_id: int, *args, **kwargs):
        session = get_object_or_404(batch_models.BatchSession.objects.select_related('batch'), pk=session_id)
        session_service.delete_session(session, request=request)
        return Response({'status': 'success', 'message': 'Session deleted successfully'})


class SessionRescheduleView(APIView):
    permission_classes = (IsAuthenticated,)

    def post(self, request, session_id: int, *args, **kwargs):
        session = get_object_or_404(batch_models.BatchSession.objects.select_related('batch'), pk=session_id)
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = session_service.reschedule_session(session, request=request, **serializer.validated_data)
        return Response({
            'status': 'success',
            'message': 'Session rescheduled successfully',
            'data': BatchSessionSerializer(session).data,
        })

    put = post
