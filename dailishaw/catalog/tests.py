"""
Test suite for the catalog
Tests: move up/down ordering, categories, products, images, media viewer
"""
import os
import shutil
import tempfile
from collections import namedtuple
from datetime import datetime, timedelta
from unittest import mock

from azure.core.exceptions import ResourceNotFoundError
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase, override_settings
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework import status

from dailishaw.catalog.models import Category, Product, ProductImage
from dailishaw.catalog.ordering import (
    UP, DOWN, move_item, needs_normalization, next_sort_order, ordered_scope, plan_move,
)
from dailishaw.catalog.storage import build_storage_path, save_product_image, delete_product_image
from dailishaw.config.urls import media_urlpatterns
from dailishaw.core.test_utils import TestDataFactory, APITestCase

Item = namedtuple('Item', ['pk', 'sort_order', 'created_at'])

BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def make_items(*orders):
    return [Item(index + 1, order, BASE_TIME + timedelta(minutes=index)) for index, order in enumerate(orders)]


def apply_plan(items, plan):
    """Return {pk: sort_order} after a plan has been applied"""
    orders = {item.pk: item.sort_order for item in items}
    orders.update(plan.renumber)
    for pk, order in plan.swap or []:
        orders[pk] = order
    return orders


class PlanMoveTests(SimpleTestCase):
    """Pure move planning, no database"""

    def test_move_up_swaps_with_previous_only(self):
        items = make_items(0, 1, 2, 3, 4)
        plan = plan_move(items, 3, UP)
        orders = apply_plan(items, plan)
        self.assertEqual(plan.renumber, {})
        self.assertEqual(orders, {1: 0, 2: 2, 3: 1, 4: 3, 5: 4})

    def test_move_up_at_top_is_noop(self):
        plan = plan_move(make_items(0, 1, 2), 1, UP)
        self.assertIsNone(plan.swap)
        self.assertEqual(plan.renumber, {})

    def test_move_down_at_bottom_is_noop(self):
        plan = plan_move(make_items(0, 1, 2), 3, DOWN)
        self.assertIsNone(plan.swap)

    def test_single_and_empty_scopes(self):
        self.assertIsNone(plan_move(make_items(0), 1, UP).swap)
        self.assertIsNone(plan_move(make_items(0), 1, DOWN).swap)
        self.assertIsNone(plan_move([], 1, DOWN).swap)

    def test_equal_orders_are_normalized_before_swap(self):
        items = make_items(3, 3, 3)
        plan = plan_move(items, 2, DOWN)
        self.assertEqual(plan.renumber, {1: 0, 2: 1, 3: 2})
        self.assertEqual(apply_plan(items, plan), {1: 0, 2: 2, 3: 1})

    def test_unnormalized_scope_renumbers_by_order_then_created_at(self):
        # A(5), B(5), C(null)
        items = make_items(5, 5, None)
        plan = plan_move(items, 3, UP)
        self.assertEqual(plan.renumber, {1: 0, 2: 1, 3: 2})
        self.assertEqual(apply_plan(items, plan), {1: 0, 2: 2, 3: 1})

    def test_nulls_sort_last(self):
        items = [
            Item(1, None, BASE_TIME),
            Item(2, 4, BASE_TIME + timedelta(minutes=1)),
            Item(3, 1, BASE_TIME + timedelta(minutes=2)),
        ]
        plan = plan_move(items, 1, UP)
        self.assertEqual(plan.renumber, {3: 0, 2: 1, 1: 2})
        self.assertEqual(apply_plan(items, plan)[1], 1)

    def test_gaps_are_tolerated(self):
        items = make_items(0, 4, 9)
        plan = plan_move(items, 3, UP)
        self.assertEqual(plan.renumber, {})
        self.assertEqual(apply_plan(items, plan), {1: 0, 2: 9, 3: 4})

    def test_unknown_direction(self):
        with self.assertRaises(ValueError):
            plan_move(make_items(0, 1), 1, 'sideways')

    def test_needs_normalization(self):
        self.assertTrue(needs_normalization([2, 2]))
        self.assertTrue(needs_normalization([0, None]))
        self.assertTrue(needs_normalization([7]))
        self.assertFalse(needs_normalization([0, 1, 2]))
        self.assertFalse(needs_normalization([]))


class MoveItemTests(TestCase):
    """move_item against the database"""

    def setUp(self):
        self.category = TestDataFactory.create_category()

    def names(self):
        return list(ordered_scope(Product.objects.filter(category=self.category)).values_list('name', flat=True))

    def orders(self):
        return dict(Product.objects.filter(category=self.category).values_list('name', 'sort_order'))

    def create(self, name, sort_order):
        return TestDataFactory.create_product(category=self.category, name=name, sort_order=sort_order)

    def scope(self):
        return Product.objects.filter(category=self.category)

    def test_down_then_up_restores_order(self):
        self.create('A', 0)
        b = self.create('B', 1)
        self.create('C', 2)

        self.assertTrue(move_item(self.scope(), b.pk, DOWN))
        self.assertEqual(self.orders(), {'A': 0, 'C': 1, 'B': 2})

        self.assertTrue(move_item(self.scope(), b.pk, UP))
        self.assertEqual(self.orders(), {'A': 0, 'B': 1, 'C': 2})

    def test_two_moves_up_from_bottom(self):
        for index, name in enumerate(['A', 'B', 'C', 'D']):
            item = self.create(name, index)
        self.assertTrue(move_item(self.scope(), item.pk, UP))
        self.assertTrue(move_item(self.scope(), item.pk, UP))
        self.assertEqual(self.names(), ['A', 'D', 'B', 'C'])

    def test_boundary_moves_do_not_write(self):
        a = self.create('A', 0)
        c = self.create('C', 1)
        self.assertFalse(move_item(self.scope(), a.pk, UP))
        self.assertFalse(move_item(self.scope(), c.pk, DOWN))
        self.assertEqual(self.orders(), {'A': 0, 'C': 1})

    def test_first_move_normalizes_unordered_scope(self):
        self.create('A', 5)
        self.create('B', 5)
        c = self.create('C', None)
        self.assertTrue(move_item(self.scope(), c.pk, UP))
        self.assertEqual(self.orders(), {'A': 0, 'C': 1, 'B': 2})

    def test_equal_orders_are_normalized_before_swap(self):
        self.create('A', 3)
        b = self.create('B', 3)
        self.create('C', 3)
        self.assertTrue(move_item(self.scope(), b.pk, DOWN))
        self.assertEqual(self.orders(), {'A': 0, 'C': 1, 'B': 2})

    def test_null_orders_sort_last_when_normalizing(self):
        x = self.create('X', None)
        self.create('Y', 4)
        self.create('Z', 1)
        self.assertTrue(move_item(self.scope(), x.pk, UP))
        self.assertEqual(self.orders(), {'Z': 0, 'X': 1, 'Y': 2})

    def test_boundary_move_keeps_initialized_orders(self):
        a = self.create('A', None)
        self.create('B', None)
        self.assertFalse(move_item(self.scope(), a.pk, UP))
        self.assertEqual(self.orders(), {'A': 0, 'B': 1})

    def test_other_scopes_untouched(self):
        other = TestDataFactory.create_category()
        TestDataFactory.create_product(category=other, name='X', sort_order=None)
        self.create('A', None)
        b = self.create('B', None)
        move_item(self.scope(), b.pk, UP)
        self.assertIsNone(Product.objects.get(name='X').sort_order)

    def test_item_outside_scope_is_refused(self):
        self.create('A', 0)
        stranger = TestDataFactory.create_product(name='Stranger')
        self.assertFalse(move_item(self.scope(), stranger.pk, UP))

    def test_failed_write_rolls_back_the_swap(self):
        a = self.create('A', 0)
        b = self.create('B', 1)
        original_update = Product.objects.filter(pk=a.pk).update
        calls = []

        def flaky_update(self_qs, **kwargs):
            calls.append(kwargs)
            if len(calls) == 2:
                raise DatabaseError('connection lost')
            return original_update.__func__(self_qs, **kwargs)

        with mock.patch('django.db.models.query.QuerySet.update', flaky_update):
            with self.assertRaises(DatabaseError):
                move_item(self.scope(), b.pk, UP)
        self.assertEqual(self.orders(), {'A': 0, 'B': 1})

    def test_next_sort_order(self):
        self.assertEqual(next_sort_order(Category.objects.exclude(pk=self.category.pk)), 0)
        self.create('A', 3)
        self.create('B', None)
        self.assertEqual(next_sort_order(self.scope()), 4)


class CategoryAPITests(APITestCase):
    """Test category endpoints"""

    def test_list_in_display_order(self):
        second = TestDataFactory.create_category(name='Second', sort_order=1)
        first = TestDataFactory.create_category(name='First', sort_order=0)
        unordered = TestDataFactory.create_category(name='Unordered')
        response = self.admin_client.get('/api/v1/dashboard/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [first.pk, second.pk, unordered.pk])

    def test_create_appends_at_end(self):
        TestDataFactory.create_category(sort_order=4)
        response = self.admin_client.post('/api/v1/dashboard/categories/', {'name': '  Cardiology  '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Cardiology')
        self.assertEqual(response.data['sort_order'], 5)
        self.assertEqual(Category.objects.get(pk=response.data['id']).created_by, self.admin)

    def test_first_category_starts_at_zero(self):
        response = self.admin_client.post('/api/v1/dashboard/categories/', {'name': 'Home'}, format='json')
        self.assertEqual(response.data['sort_order'], 0)

    def test_duplicate_name_rejected(self):
        TestDataFactory.create_category(name='Neurology')
        response = self.admin_client.post('/api/v1/dashboard/categories/', {'name': 'neurology'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['name'][0]), 'Category name already exists')
        self.assertEqual(Category.objects.count(), 1)

    def test_rename_keeps_own_name_valid(self):
        category = TestDataFactory.create_category(name='Ortho')
        response = self.admin_client.patch(
            f'/api/v1/dashboard/categories/{category.pk}/', {'name': 'Ortho', 'is_active': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])

    def test_delete_cascades_to_products_and_images(self):
        category = TestDataFactory.create_category()
        product = TestDataFactory.create_product(category=category)
        TestDataFactory.create_product_image(product=product)
        response = self.admin_client.delete(f'/api/v1/dashboard/categories/{category.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())
        self.assertEqual(ProductImage.objects.count(), 0)

    def test_move(self):
        a = TestDataFactory.create_category(name='A')
        b = TestDataFactory.create_category(name='B')
        response = self.admin_client.post(f'/api/v1/dashboard/categories/{b.pk}/move/', {'direction': 'up'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})
        a.refresh_from_db()
        b.refresh_from_db()
        self.assertEqual((b.sort_order, a.sort_order), (0, 1))

    def test_move_at_boundary(self):
        a = TestDataFactory.create_category(name='A', sort_order=0)
        TestDataFactory.create_category(name='B', sort_order=1)
        response = self.admin_client.post(f'/api/v1/dashboard/categories/{a.pk}/move/', {'direction': 'up'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_move_validation(self):
        category = TestDataFactory.create_category()
        response = self.admin_client.post(f'/api/v1/dashboard/categories/{category.pk}/move/', {'direction': 'left'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('direction', response.data)

        response = self.admin_client.post('/api/v1/dashboard/categories/999999/move/', {'direction': 'up'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_move_store_failure(self):
        category = TestDataFactory.create_category()
        with mock.patch('dailishaw.catalog.views.move_item', side_effect=DatabaseError('boom')):
            response = self.admin_client.post(f'/api/v1/dashboard/categories/{category.pk}/move/', {'direction': 'down'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(response.data['success'])

    def test_default_product_created_once(self):
        category = TestDataFactory.create_category()
        response = self.admin_client.post(f'/api/v1/dashboard/categories/{category.pk}/default-product/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Home Media')

        again = self.admin_client.post(f'/api/v1/dashboard/categories/{category.pk}/default-product/')
        self.assertEqual(again.status_code, status.HTTP_200_OK)
        self.assertEqual(again.data['id'], response.data['id'])

    def test_default_product_matches_prefix(self):
        category = TestDataFactory.create_category()
        existing = TestDataFactory.create_product(category=category, name='home media (main)')
        response = self.admin_client.post(f'/api/v1/dashboard/categories/{category.pk}/default-product/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], existing.pk)


class ProductAPITests(APITestCase):
    """Test product endpoints"""

    def setUp(self):
        super().setUp()
        self.category = TestDataFactory.create_category()

    def test_create_without_sort_order(self):
        response = self.admin_client.post('/api/v1/dashboard/products/', {
            'category': self.category.pk,
            'name': 'Paracetamol',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['sort_order'])

    def test_category_required(self):
        response = self.admin_client.post('/api/v1/dashboard/products/', {'name': 'Orphan'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data)

    def test_duplicate_name_in_category_rejected(self):
        TestDataFactory.create_product(category=self.category, name='Syrup')
        response = self.admin_client.post('/api/v1/dashboard/products/', {
            'category': self.category.pk,
            'name': 'Syrup',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['name'][0]), 'Product name already exists in this category')

        other = TestDataFactory.create_category()
        response = self.admin_client.post('/api/v1/dashboard/products/', {
            'category': other.pk,
            'name': 'Syrup',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_by_category_in_display_order(self):
        late = TestDataFactory.create_product(category=self.category, name='Late', sort_order=None)
        second = TestDataFactory.create_product(category=self.category, name='Second', sort_order=1)
        first = TestDataFactory.create_product(category=self.category, name='First', sort_order=0)
        TestDataFactory.create_product(name='Elsewhere')
        response = self.admin_client.get(f'/api/v1/dashboard/products/?category={self.category.pk}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [first.pk, second.pk, late.pk])

    def test_move_stays_in_category(self):
        a = TestDataFactory.create_product(category=self.category, name='A')
        b = TestDataFactory.create_product(category=self.category, name='B')
        outsider = TestDataFactory.create_product(name='Outsider')
        response = self.admin_client.post(f'/api/v1/dashboard/products/{a.pk}/move/', {'direction': 'down'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        a.refresh_from_db()
        b.refresh_from_db()
        outsider.refresh_from_db()
        self.assertEqual((b.sort_order, a.sort_order), (0, 1))
        self.assertIsNone(outsider.sort_order)

    def test_change_category_appends_to_new_category(self):
        target = TestDataFactory.create_category(name='Target')
        TestDataFactory.create_product(category=target, name='A', sort_order=0)
        TestDataFactory.create_product(category=target, name='B', sort_order=1)
        moved = TestDataFactory.create_product(category=self.category, name='M', sort_order=1)

        response = self.admin_client.patch(f'/api/v1/dashboard/products/{moved.pk}/', {'category': target.pk}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sort_order'], 2)

        response = self.admin_client.post(f'/api/v1/dashboard/products/{moved.pk}/move/', {'direction': 'up'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        orders = dict(Product.objects.filter(category=target).values_list('name', 'sort_order'))
        self.assertEqual(orders, {'A': 0, 'M': 1, 'B': 2})

    def test_patch_within_category_keeps_sort_order(self):
        product = TestDataFactory.create_product(category=self.category, name='Tonic', sort_order=4)
        response = self.admin_client.patch(f'/api/v1/dashboard/products/{product.pk}/', {
            'category': self.category.pk,
            'name': 'Tonic Plus',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sort_order'], 4)

    def test_delete_removes_images(self):
        product = TestDataFactory.create_product(category=self.category)
        TestDataFactory.create_product_image(product=product)
        response = self.admin_client.delete(f'/api/v1/dashboard/products/{product.pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(ProductImage.objects.count(), 0)


class ProductImageAPITests(APITestCase):
    """Test image upload and deletion against a temporary media root"""

    def setUp(self):
        super().setUp()
        self.media_root = tempfile.mkdtemp()
        self.settings_override = override_settings(MEDIA_ROOT=self.media_root)
        self.settings_override.enable()
        self.product = TestDataFactory.create_product()

    def tearDown(self):
        self.settings_override.disable()
        shutil.rmtree(self.media_root, ignore_errors=True)
        super().tearDown()

    def upload(self, file):
        return self.admin_client.post(
            f'/api/v1/dashboard/products/{self.product.pk}/images/', {'image': file}, format='multipart'
        )

    def test_upload_image(self):
        response = self.upload(TestDataFactory.image_file())
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['storage_path'].startswith('products/'))
        self.assertTrue(response.data['storage_path'].endswith('.png'))
        self.assertTrue(response.data['image_url'].startswith('http://testserver/media/products/'))
        self.assertEqual(response.data['sort_order'], 0)
        self.assertTrue(os.path.exists(os.path.join(self.media_root, response.data['storage_path'])))

        second = self.upload(TestDataFactory.image_file(name='second.png'))
        self.assertEqual(second.data['sort_order'], 1)

        listing = self.admin_client.get(f'/api/v1/dashboard/products/{self.product.pk}/images/')
        self.assertEqual([row['id'] for row in listing.data], [response.data['id'], second.data['id']])

    def test_rejects_non_image(self):
        response = self.upload(SimpleUploadedFile('notes.txt', b'not an image', content_type='text/plain'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data)
        self.assertEqual(ProductImage.objects.count(), 0)

    @override_settings(MAX_IMAGE_UPLOAD_SIZE=10)
    def test_rejects_oversized_image(self):
        response = self.upload(TestDataFactory.image_file())
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data)
        self.assertEqual(ProductImage.objects.count(), 0)

    def test_delete_removes_file_then_record(self):
        uploaded = self.upload(TestDataFactory.image_file())
        path = os.path.join(self.media_root, uploaded.data['storage_path'])
        response = self.admin_client.delete(f'/api/v1/dashboard/product-images/{uploaded.data["id"]}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(os.path.exists(path))
        self.assertFalse(ProductImage.objects.filter(pk=uploaded.data['id']).exists())

    def test_failed_record_with_failed_cleanup_still_answers(self):
        with mock.patch('dailishaw.catalog.views.next_sort_order', side_effect=DatabaseError('db down')), \
                mock.patch('dailishaw.catalog.views.delete_product_image', side_effect=OSError('disk gone')) as cleanup:
            response = self.upload(TestDataFactory.image_file())
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Failed to save image')
        cleanup.assert_called_once()
        self.assertEqual(ProductImage.objects.count(), 0)

    def test_storage_path_format(self):
        path = build_storage_path('Scan.JPEG')
        folder, filename = path.split('/')
        token, rest = filename.split('_')
        millis, ext = rest.split('.')
        self.assertEqual(folder, 'products')
        self.assertTrue(token)
        self.assertTrue(millis.isdigit())
        self.assertEqual(ext, 'jpeg')


class MediaLibraryTests(APITestCase):
    """Test the field user media viewer"""

    def test_media_library(self):
        home = TestDataFactory.create_category(name='Home', sort_order=1)
        other = TestDataFactory.create_category(name='Cardio', sort_order=0)
        hidden = TestDataFactory.create_category(name='Hidden', is_active=False)
        with_images = TestDataFactory.create_product(category=home, name='Brochure')
        TestDataFactory.create_product(category=home, name='Empty')
        hidden_product = TestDataFactory.create_product(category=hidden)
        older = TestDataFactory.create_product_image(product=with_images)
        newer = TestDataFactory.create_product_image(product=with_images)
        ProductImage.objects.filter(pk=older.pk).update(created_at=newer.created_at - timedelta(hours=1))
        TestDataFactory.create_product_image(product=hidden_product)

        response = self.user_client.get('/api/v1/user-dashboard/media/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data['categories']], [other.pk, home.pk])
        self.assertEqual([row['id'] for row in response.data['products']], [with_images.pk])
        self.assertEqual([row['id'] for row in response.data['images']], [newer.pk, older.pk])
        self.assertEqual(response.data['images'][0]['product_name'], 'Brochure')
        self.assertEqual(response.data['images'][0]['category_name'], 'Home')
        self.assertEqual(response.data['default_category'], home.pk)

    def test_no_home_category(self):
        TestDataFactory.create_category(name='Cardio')
        response = self.user_client.get('/api/v1/user-dashboard/media/')
        self.assertIsNone(response.data['default_category'])


@override_settings(AZURE_STORAGE_ACCOUNT_NAME='dailishawmedia', AZURE_STORAGE_ACCOUNT_KEY='c2VjcmV0', AZURE_BLOB_FOLDER='prod')
class AzureStorageTests(SimpleTestCase):
    """Blob Storage path with the Azure client mocked out"""

    def test_upload_goes_to_blob_storage(self):
        with mock.patch('dailishaw.catalog.storage.BlobServiceClient') as service:
            blob_client = service.from_connection_string.return_value.get_blob_client.return_value
            blob_client.url = 'https://dailishawmedia.blob.core.windows.net/product-images/prod/products/a.png'
            path, url = save_product_image(TestDataFactory.image_file())

        self.assertTrue(path.startswith('products/'))
        self.assertEqual(url, blob_client.url)
        kwargs = service.from_connection_string.return_value.get_blob_client.call_args.kwargs
        self.assertEqual(kwargs['container'], 'product-images')
        self.assertEqual(kwargs['blob'], f'prod/{path}')
        blob_client.upload_blob.assert_called_once()

    def test_delete_tolerates_missing_blob(self):
        with mock.patch('dailishaw.catalog.storage.BlobServiceClient') as service:
            blob_client = service.from_connection_string.return_value.get_blob_client.return_value
            blob_client.delete_blob.side_effect = ResourceNotFoundError('gone')
            delete_product_image('products/a.png')
        blob_client.delete_blob.assert_called_once()

    def test_media_route_needs_full_account(self):
        self.assertEqual(media_urlpatterns(), [])
        with override_settings(AZURE_STORAGE_ACCOUNT_KEY=''):
            self.assertEqual(len(media_urlpatterns()), 1)
