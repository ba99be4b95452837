# core/api/views.py

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.params import query_date, query_int
from core.api.serializers import (
    ActivityLogSerializer,
    BranchSerializer,
    CustomerSerializer,
)
from core.models import Branch, Customer
from core.services import activity


class BranchListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["core"], responses=BranchSerializer(many=True))
    def get(self, request):
        qs = Branch.objects.filter(is_active=True).order_by("name")
        return Response(BranchSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["core"], request=BranchSerializer, responses={201: BranchSerializer}
    )
    def post(self, request):
        s = BranchSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        branch = s.save()
        return Response(BranchSerializer(branch).data, status=status.HTTP_201_CREATED)


class CustomerListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["core"], responses=CustomerSerializer(many=True))
    def get(self, request):
        qs = Customer.objects.order_by("name")
        return Response(
            CustomerSerializer(qs, many=True).data, status=status.HTTP_200_OK
        )

    @extend_schema(
        tags=["core"], request=CustomerSerializer, responses={201: CustomerSerializer}
    )
    def post(self, request):
        s = CustomerSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        customer = s.save()
        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )


class CustomerDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["core"], responses=CustomerSerializer)
    def get(self, request, customer_id):
        customer = get_object_or_404(Customer, id=customer_id)
        return Response(CustomerSerializer(customer).data)

    @extend_schema(
        tags=["core"], request=CustomerSerializer, responses=CustomerSerializer
    )
    def patch(self, request, customer_id):
        customer = get_object_or_404(Customer, id=customer_id)
        s = CustomerSerializer(customer, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        customer = s.save()
        return Response(CustomerSerializer(customer).data)


class ActivityLogListView(GenericAPIView):
    """
    Newest first, paged by ?limit&offset.
    Filters: module, user_id, from, to (YYYY-MM-DD, on created_at).
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["core"],
        parameters=[
            OpenApiParameter("module", str),
            OpenApiParameter("user_id", int),
            OpenApiParameter("from", str),
            OpenApiParameter("to", str),
        ],
        responses=ActivityLogSerializer(many=True),
    )
    def get(self, request):
        qs = activity.activity_entries(
            module=(request.query_params.get("module") or "").strip() or None,
            user_id=query_int(request, "user_id"),
            date_from=query_date(request, "from"),
            date_to=query_date(request, "to"),
        )
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(ActivityLogSerializer(page, many=True).data)
