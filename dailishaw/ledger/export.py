"""
CSV export of field user logs for the admin console.

Rows are comma separated with '\n' line endings. A field holding a comma,
quote or newline is quoted with embedded quotes doubled, and empty optional
values are written as '-'.
"""
import csv
import io

from django.utils import timezone

PLACEHOLDER = '-'

EXPENSE_HEADERS = ['User', 'Date', 'Doctor', 'Location', 'Amount', 'Fare', 'Remarks']
INPUT_HEADERS = ['User', 'SL No', 'Doctor Name', 'Input', 'Quantity', 'Date']
INVESTMENT_HEADERS = ['User', 'SL No', 'Doctor Name', 'Investment', 'ROI', 'Date']


def cell(value):
    if value is None:
        return PLACEHOLDER
    value = str(value)
    return value if value.strip() else PLACEHOLDER


def local_date(value):
    """YYYY-MM-DD for a date or an aware datetime in the project time zone"""
    if value is None:
        return PLACEHOLDER
    if hasattr(value, 'hour') and timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%Y-%m-%d')


def owner_name(row):
    return cell(row.user.display_name)


def expense_row(expense):
    return [
        owner_name(expense),
        local_date(expense.expense_date),
        cell(expense.doctor_label),
        cell(expense.location),
        cell(expense.amount),
        cell(expense.fare_amount),
        cell(expense.remarks),
    ]


def input_row(entry):
    return [
        owner_name(entry),
        cell(entry.sl_no),
        cell(entry.doctor_name),
        cell(entry.input),
        cell(entry.quantity),
        local_date(entry.created_at),
    ]


def investment_row(investment):
    return [
        owner_name(investment),
        cell(investment.sl_no),
        cell(investment.doctor_name),
        cell(investment.investment),
        cell(investment.roi),
        local_date(investment.created_at),
    ]


def render_csv(headers, rows):
    """Render header plus rows as CSV text"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(headers)
    writer.writerows(rows)
    return buffer.getvalue()


def export_filename(entity, user=None, today=None):
    """<Entity>_<display name | User | All_Users>_<YYYY-MM-DD>.csv"""
    if user is None:
        owner = 'All_Users'
    else:
        owner = user.display_name or 'User'
    today = today or timezone.localdate()
    return f"{entity}_{owner}_{today.isoformat()}.csv"
