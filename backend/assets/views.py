from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404

from backend.core.utils import create_audit_log
from .models import FixedAsset
from .serializers import FixedAssetSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def fixed_asset_list_create(request):
    """List fixed assets with their depreciated value or register a new one"""
    if request.method == 'GET':
        assets = FixedAsset.objects.select_related('vendor')
        status_filter = request.query_params.get('status')
        category = request.query_params.get('category')
        if status_filter:
            assets = assets.filter(status=status_filter)
        if category:
            assets = assets.filter(category__iexact=category)
        return Response(FixedAssetSerializer(assets, many=True).data)
    else:
        serializer = FixedAssetSerializer(data=request.data)
        if serializer.is_valid():
            asset = serializer.save()
            create_audit_log(request, 'create', 'FixedAsset', asset.id, request.data, object_name=asset.name)
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def fixed_asset_detail(request, pk):
    asset = get_object_or_404(FixedAsset.objects.select_related('vendor'), pk=pk)

    if request.method == 'GET':
        return Response(FixedAssetSerializer(asset).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = FixedAssetSerializer(asset, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, 'update', 'FixedAsset', asset.id, request.data, object_name=asset.name)
            return Response(FixedAssetSerializer(asset).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        create_audit_log(request, 'delete', 'FixedAsset', asset.id, object_name=asset.name)
        asset.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
