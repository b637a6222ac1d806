from django.contrib import admin
from django.utils.html import format_html
from .models import Category, Product, ProductImage


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'sort_order', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name']
    ordering = ['sort_order', 'created_at']


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0
    fields = ['preview', 'image_url', 'storage_path', 'file_size', 'sort_order']
    readonly_fields = ['preview', 'file_size']

    def preview(self, obj):
        if not obj.image_url:
            return '-'
        return format_html('<img src="{}" style="max-height: 60px;" />', obj.image_url)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'sort_order', 'is_active', 'created_at']
    list_filter = ['is_active', 'category', 'created_at']
    search_fields = ['name', 'description']
    ordering = ['category', 'sort_order', 'created_at']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ProductImageInline]


@admin.register(ProductImage)
class ProductImageAdmin(admin.ModelAdmin):
    list_display = ['product', 'storage_path', 'mime_type', 'file_size', 'created_at']
    list_filter = ['mime_type', 'created_at']
    search_fields = ['product__name', 'storage_path']
    readonly_fields = ['created_at']
