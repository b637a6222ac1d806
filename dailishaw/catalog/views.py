import logging

from azure.core.exceptions import AzureError
from django.db import DatabaseError
from django.db.models import Count, F, Exists, OuterRef
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response

from dailishaw.core.permissions import IsAdminRole, IsFieldUser
from .models import Category, Product, ProductImage
from .ordering import move_item, next_sort_order, ordered_scope
from .serializers import (
    CategorySerializer, ProductSerializer, ProductImageSerializer,
    ProductImageUploadSerializer, MoveSerializer,
    MediaCategorySerializer, MediaProductSerializer, MediaImageSerializer,
)
from .storage import save_product_image, delete_product_image

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_NAME = 'Home Media'
DEFAULT_CATEGORY_NAME = 'home'


def _move(request, queryset, item_id, label):
    """Shared body of the move endpoints"""
    serializer = MoveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    direction = serializer.validated_data['direction']

    try:
        moved = move_item(queryset, item_id, direction)
    except DatabaseError as e:
        logger.error(f"Error moving {label} {item_id} {direction}: {str(e)}", exc_info=True)
        return Response({'success': False, 'error': f'Failed to move {label}'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not moved:
        return Response(
            {'success': False, 'error': f'{label.capitalize()} is already at the {"top" if direction == "up" else "bottom"}'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return Response({'success': True})


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def category_list_create(request):
    """List categories in display order or create a new one at the end"""
    if request.method == 'GET':
        categories = ordered_scope(Category.objects.annotate(num_products=Count('products')))
        serializer = CategorySerializer(categories, many=True)
        return Response(serializer.data)

    serializer = CategorySerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        category = serializer.save(
            created_by=request.user,
            sort_order=next_sort_order(Category.objects.all()),
        )
    except DatabaseError as e:
        logger.error(f"Failed to create category: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to create category'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"Created category '{category.name}' (ID: {category.pk}) at position {category.sort_order}")
    return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        return Response(CategorySerializer(category).data)

    if request.method == 'PATCH':
        serializer = CategorySerializer(category, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    # Products and their image rows go with it
    storage_paths = list(
        ProductImage.objects.filter(product__category=category).values_list('storage_path', flat=True)
    )
    category.delete()
    for path in storage_paths:
        try:
            delete_product_image(path)
        except (OSError, AzureError) as e:
            logger.error(f"Failed to delete stored image {path}: {str(e)}", exc_info=True)
    logger.info(f"Deleted category {pk} with {len(storage_paths)} images")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def category_move(request, pk):
    get_object_or_404(Category, pk=pk)
    return _move(request, Category.objects.all(), pk, 'category')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def category_default_product(request, pk):
    """The category's "Home Media" product, created on first use"""
    category = get_object_or_404(Category, pk=pk)
    product = Product.objects.filter(category=category, name__istartswith=DEFAULT_PRODUCT_NAME).order_by('created_at').first()
    if product is not None:
        return Response(ProductSerializer(product).data)

    product = Product.objects.create(
        category=category,
        name=DEFAULT_PRODUCT_NAME,
        description=f'Default media product for {category.name}',
        created_by=request.user,
    )
    logger.info(f"Created default product {product.pk} for category {category.pk}")
    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


# Product views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
def product_list_create(request):
    """List products (optionally of one category) or create a product"""
    if request.method == 'GET':
        products = Product.objects.select_related('category').annotate(num_images=Count('images'))
        category_id = request.query_params.get('category')
        if category_id:
            if not category_id.isdigit():
                return Response({'category': ['A valid category id is required.']}, status=status.HTTP_400_BAD_REQUEST)
            products = ordered_scope(products.filter(category_id=category_id))
        else:
            products = products.order_by(
                F('category__sort_order').asc(nulls_last=True), 'category__created_at',
                F('sort_order').asc(nulls_last=True), 'created_at', 'pk',
            )
        return Response(ProductSerializer(products, many=True).data)

    serializer = ProductSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        product = serializer.save(created_by=request.user)
    except DatabaseError as e:
        logger.error(f"Failed to create product: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to create product'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    logger.info(f"Created product '{product.name}' (ID: {product.pk}) in category {product.category_id}")
    return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAdminRole])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = get_object_or_404(Product.objects.select_related('category'), pk=pk)

    if request.method == 'GET':
        return Response(ProductSerializer(product).data)

    if request.method == 'PATCH':
        serializer = ProductSerializer(product, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    storage_paths = list(product.images.values_list('storage_path', flat=True))
    product.delete()
    for path in storage_paths:
        try:
            delete_product_image(path)
        except (OSError, AzureError) as e:
            logger.error(f"Failed to delete stored image {path}: {str(e)}", exc_info=True)
    logger.info(f"Deleted product {pk} with {len(storage_paths)} images")
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def product_move(request, pk):
    """Move a product within its own category"""
    product = get_object_or_404(Product, pk=pk)
    return _move(request, Product.objects.filter(category_id=product.category_id), pk, 'product')


# Product image views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminRole])
@parser_classes([MultiPartParser, FormParser])
def product_images(request, pk):
    """List a product's images or upload a new one"""
    product = get_object_or_404(Product, pk=pk)

    if request.method == 'GET':
        images = product.images.order_by('sort_order', 'created_at')
        return Response(ProductImageSerializer(images, many=True).data)

    upload = ProductImageUploadSerializer(data=request.data)
    if not upload.is_valid():
        return Response(upload.errors, status=status.HTTP_400_BAD_REQUEST)
    image_file = upload.validated_data['image']

    try:
        storage_path, url = save_product_image(image_file)
    except (OSError, AzureError) as e:
        logger.error(f"Failed to store image for product {product.pk}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to upload image'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    try:
        image = ProductImage.objects.create(
            product=product,
            image_url=request.build_absolute_uri(url),
            storage_path=storage_path,
            file_size=image_file.size,
            mime_type=getattr(image_file, 'content_type', '') or '',
            sort_order=next_sort_order(product.images.all()),
            created_by=request.user,
        )
    except DatabaseError as e:
        logger.error(f"Failed to record image {storage_path}: {str(e)}", exc_info=True)
        try:
            delete_product_image(storage_path)
        except (OSError, AzureError) as cleanup_error:
            logger.error(f"Failed to remove orphaned image {storage_path}: {str(cleanup_error)}", exc_info=True)
        return Response({'error': 'Failed to save image'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Uploaded image {image.pk} for product {product.pk}")
    return Response(ProductImageSerializer(image).data, status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([IsAdminRole])
def product_image_delete(request, pk):
    """Delete the stored file first, then the record"""
    image = get_object_or_404(ProductImage, pk=pk)
    try:
        delete_product_image(image.storage_path)
    except (OSError, AzureError) as e:
        logger.error(f"Failed to delete stored image {image.storage_path}: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to delete image'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    image.delete()
    logger.info(f"Deleted product image {pk}")
    return Response(status=status.HTTP_204_NO_CONTENT)


# Field user media viewer
@api_view(['GET'])
@permission_classes([IsFieldUser])
def media_library(request):
    """Active categories, their products that have images, and all those images"""
    categories = ordered_scope(Category.objects.filter(is_active=True))
    products = ordered_scope(
        Product.objects.filter(category__is_active=True, is_active=True)
        .filter(Exists(ProductImage.objects.filter(product=OuterRef('pk'))))
    )
    images = (
        ProductImage.objects
        .filter(product__is_active=True, product__category__is_active=True)
        .select_related('product__category')
        .order_by('-created_at', '-pk')
    )
    default_category = next((c for c in categories if c.name.strip().lower() == DEFAULT_CATEGORY_NAME), None)

    return Response({
        'categories': MediaCategorySerializer(categories, many=True).data,
        'products': MediaProductSerializer(products, many=True).data,
        'images': MediaImageSerializer(images, many=True).data,
        'default_category': default_category.pk if default_category else None,
    })
