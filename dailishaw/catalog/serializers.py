from django.conf import settings
from rest_framework import serializers

from .models import Category, Product, ProductImage
from .ordering import DIRECTIONS, next_sort_order


class CategorySerializer(serializers.ModelSerializer):
    product_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'sort_order', 'is_active', 'product_count', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['sort_order', 'created_by', 'created_at', 'updated_at']
        # Uniqueness is checked in validate_name with a friendlier message
        extra_kwargs = {'name': {'validators': []}}

    def get_product_count(self, obj):
        annotated = getattr(obj, 'num_products', None)
        if annotated is not None:
            return annotated
        return obj.products.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Category name is required")
        existing = Category.objects.filter(name__iexact=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Category name already exists")
        return value


class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    image_count = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'category', 'category_name', 'name', 'description', 'sort_order', 'is_active', 'image_count', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['sort_order', 'created_by', 'created_at', 'updated_at']

    def get_image_count(self, obj):
        annotated = getattr(obj, 'num_images', None)
        if annotated is not None:
            return annotated
        return obj.images.count()

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value

    def validate(self, attrs):
        category = attrs.get('category') or getattr(self.instance, 'category', None)
        name = attrs.get('name') or getattr(self.instance, 'name', None)
        if category is not None and name:
            existing = Product.objects.filter(category=category, name__iexact=name)
            if self.instance is not None:
                existing = existing.exclude(pk=self.instance.pk)
            if existing.exists():
                raise serializers.ValidationError({'name': "Product name already exists in this category"})
        return attrs

    def update(self, instance, validated_data):
        category = validated_data.get('category')
        if category is not None and category.pk != instance.category_id:
            # Moving to another category appends to the end of its ordering
            validated_data['sort_order'] = next_sort_order(
                Product.objects.filter(category=category).exclude(pk=instance.pk)
            )
        return super().update(instance, validated_data)


class ProductImageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductImage
        fields = ['id', 'product', 'image_url', 'storage_path', 'file_size', 'mime_type', 'sort_order', 'created_by', 'created_at']
        read_only_fields = fields


class ProductImageUploadSerializer(serializers.Serializer):
    """Pillow-backed check that the upload really is an image"""
    image = serializers.ImageField()

    def validate_image(self, value):
        limit = settings.MAX_IMAGE_UPLOAD_SIZE
        if value.size > limit:
            raise serializers.ValidationError(f"Image must be {limit // (1024 * 1024)}MB or smaller")
        content_type = getattr(value, 'content_type', '') or ''
        if content_type and not content_type.startswith('image/'):
            raise serializers.ValidationError("Please upload an image file")
        return value


class MoveSerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=DIRECTIONS)


class MediaImageSerializer(serializers.ModelSerializer):
    """Image row for the field user media viewer"""
    product_id = serializers.IntegerField(source='product.id', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    category_id = serializers.IntegerField(source='product.category_id', read_only=True)
    category_name = serializers.CharField(source='product.category.name', read_only=True)

    class Meta:
        model = ProductImage
        fields = ['id', 'image_url', 'product_id', 'product_name', 'category_id', 'category_name', 'created_at']


class MediaProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ['id', 'category', 'name', 'description', 'sort_order']


class MediaCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'description', 'sort_order']
