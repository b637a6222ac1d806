from decimal import Decimal

from rest_framework import serializers

from .models import Doctor, Expense, InputEntry, Investment


class DoctorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Doctor
        fields = ['id', 'name', 'clinic', 'specialty']


class OwnerMixin(serializers.Serializer):
    """Adds the owning field user's display info for the admin console"""
    user_display_name = serializers.SerializerMethodField()
    user_login = serializers.CharField(source='user.username', read_only=True)

    def get_user_display_name(self, obj):
        return obj.user.display_name or None


class ExpenseSerializer(serializers.ModelSerializer):
    doctor = serializers.PrimaryKeyRelatedField(queryset=Doctor.objects.filter(is_active=True), required=False, allow_null=True)
    doctor_details = DoctorSerializer(source='doctor', read_only=True)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    fare_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, allow_null=True)
    total = serializers.DecimalField(max_digits=13, decimal_places=2, read_only=True)

    class Meta:
        model = Expense
        fields = [
            'id', 'expense_date', 'doctor', 'doctor_details', 'doctor_name', 'location',
            'amount', 'fare_amount', 'total', 'remarks', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def validate_doctor_name(self, value):
        value = (value or '').strip()
        return value or None

    def validate_remarks(self, value):
        value = (value or '').strip()
        return value or None

    def validate(self, attrs):
        doctor = attrs.get('doctor', getattr(self.instance, 'doctor', None))
        doctor_name = attrs.get('doctor_name', getattr(self.instance, 'doctor_name', None))
        if doctor and doctor_name:
            raise serializers.ValidationError({'doctor_name': "Choose a doctor from the list or enter a name, not both"})
        return attrs


class AdminExpenseSerializer(OwnerMixin, ExpenseSerializer):
    class Meta(ExpenseSerializer.Meta):
        fields = ExpenseSerializer.Meta.fields + ['user', 'user_display_name', 'user_login']
        read_only_fields = fields


class InputEntrySerializer(serializers.ModelSerializer):
    quantity = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Quantity must be greater than 0'})

    class Meta:
        model = InputEntry
        fields = ['id', 'sl_no', 'doctor_name', 'input', 'quantity', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class AdminInputEntrySerializer(OwnerMixin, InputEntrySerializer):
    class Meta(InputEntrySerializer.Meta):
        fields = InputEntrySerializer.Meta.fields + ['user', 'user_display_name', 'user_login']
        read_only_fields = fields


class InvestmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Investment
        fields = ['id', 'sl_no', 'doctor_name', 'investment', 'roi', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']


class AdminInvestmentSerializer(OwnerMixin, InvestmentSerializer):
    class Meta(InvestmentSerializer.Meta):
        fields = InvestmentSerializer.Meta.fields + ['user', 'user_display_name', 'user_login']
        read_only_fields = fields
