from django.urls import path
from .views import (
    category_list_create, category_detail, category_move, category_default_product,
    product_list_create, product_detail, product_move,
    product_images, product_image_delete,
    media_library,
)

urlpatterns = [
    # Category endpoints
    path('dashboard/categories/', category_list_create, name='category-list-create'),
    path('dashboard/categories/<int:pk>/', category_detail, name='category-detail'),
    path('dashboard/categories/<int:pk>/move/', category_move, name='category-move'),
    path('dashboard/categories/<int:pk>/default-product/', category_default_product, name='category-default-product'),

    # Product endpoints
    path('dashboard/products/', product_list_create, name='product-list-create'),
    path('dashboard/products/<int:pk>/', product_detail, name='product-detail'),
    path('dashboard/products/<int:pk>/move/', product_move, name='product-move'),
    path('dashboard/products/<int:pk>/images/', product_images, name='product-images'),
    path('dashboard/product-images/<int:pk>/', product_image_delete, name='product-image-delete'),

    # Field user media viewer
    path('user-dashboard/media/', media_library, name='media-library'),
]
