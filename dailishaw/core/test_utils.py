"""
Test utilities and factories for creating test data
"""
import io
import random
import string
from decimal import Decimal

from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.utils import timezone
from PIL import Image
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from dailishaw.core.models import User, Role
from dailishaw.catalog.models import Category, Product, ProductImage
from dailishaw.ledger.models import Doctor, Expense, InputEntry, Investment


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, password='testpass123', display_name='', is_active=True):
        """Create a field user"""
        if not username:
            username = f'user_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            email=f'{username}.dailishaw@gmail.com',
            password=password,
            role=Role.USER,
            display_name=display_name,
            shared_password=password,
            is_active=is_active,
        )

    @staticmethod
    def create_admin(username=None, password='adminpass123'):
        """Create an administrator"""
        if not username:
            username = f'admin_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            email=f'{username}@dailishaw.test',
            password=password,
            role=Role.ADMIN,
            display_name='Admin',
        )

    @staticmethod
    def create_category(name=None, sort_order=None, is_active=True):
        if not name:
            name = f'Category_{TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            description=f'Test category {name}',
            sort_order=sort_order,
            is_active=is_active,
        )

    @staticmethod
    def create_product(category=None, name=None, sort_order=None, is_active=True):
        if not category:
            category = TestDataFactory.create_category()
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        return Product.objects.create(
            category=category,
            name=name,
            sort_order=sort_order,
            is_active=is_active,
        )

    @staticmethod
    def create_product_image(product=None, sort_order=0):
        """Create an image row without touching storage"""
        if not product:
            product = TestDataFactory.create_product()
        path = f'products/{TestDataFactory.random_string(12)}_1700000000000.png'
        return ProductImage.objects.create(
            product=product,
            image_url=f'http://testserver/media/{path}',
            storage_path=path,
            file_size=68,
            mime_type='image/png',
            sort_order=sort_order,
        )

    @staticmethod
    def create_doctor(name=None, clinic='City Clinic', specialty=None, is_active=True):
        if not name:
            name = f'Dr. {TestDataFactory.random_string(6)}'
        return Doctor.objects.create(name=name, clinic=clinic, specialty=specialty, is_active=is_active)

    @staticmethod
    def create_expense(user, amount=Decimal('100.00'), fare_amount=None, expense_date=None,
                       doctor=None, doctor_name='Dr. Rao', location='Kolkata', remarks=None):
        """Create an expense for a field user"""
        return Expense.objects.create(
            user=user,
            created_by=user,
            expense_date=expense_date or timezone.localdate(),
            doctor=doctor,
            doctor_name=None if doctor else doctor_name,
            location=location,
            amount=amount,
            fare_amount=fare_amount,
            remarks=remarks,
        )

    @staticmethod
    def create_input(user, sl_no='1', doctor_name='Dr. Rao', input='Samples', quantity=5):
        return InputEntry.objects.create(
            user=user,
            sl_no=sl_no,
            doctor_name=doctor_name,
            input=input,
            quantity=quantity,
        )

    @staticmethod
    def create_investment(user, sl_no='1', doctor_name='Dr. Rao', investment='Conference', roi='High'):
        return Investment.objects.create(
            user=user,
            sl_no=sl_no,
            doctor_name=doctor_name,
            investment=investment,
            roi=roi,
        )

    @staticmethod
    def image_file(name='photo.png', size=(10, 10), image_format='PNG', content_type='image/png'):
        """An in-memory image upload"""
        buffer = io.BytesIO()
        Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format=image_format)
        return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class APITestCase(TestCase):
    """TestCase with an empty session cache and ready-made admin/field user clients"""

    def setUp(self):
        cache.clear()
        self.admin = TestDataFactory.create_admin()
        self.field_user = TestDataFactory.create_user(display_name='Field User')
        self.admin_client = AuthenticatedAPIClient().authenticate_user(self.admin)
        self.user_client = AuthenticatedAPIClient().authenticate_user(self.field_user)
        self.anon_client = APIClient()

    def tearDown(self):
        cache.clear()
