"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Excel export of the period-wise expenditure report.
-------------------------------------------------------------------------
"""
from typing import Any, Dict

from django.http import HttpResponse
from django.utils import timezone
from django.utils.text import slugify
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from apps.projects.models import Project

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
AMOUNT_FORMAT = '#,##0.00'


def build_period_workbook(project: Project, matrix: Dict[str, Any]) -> Workbook:
    """
    Lay the period matrix out as a sheet: one row per field, one column
    per period, a total column and a totals row.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "Period-wise Expenditure"

    headers = ['Budget Field'] + [c['label'] for c in matrix['columns']] + ['Total']

    header_fill = PatternFill(start_color='366092', end_color='366092', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')

    ws.cell(row=1, column=1).value = project.name
    ws.cell(row=1, column=1).font = Font(bold=True, size=12)

    for col_num, header in enumerate(headers, 1):
        cell = ws.cell(row=2, column=col_num)
        cell.value = header
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

    row_num = 3
    for row in matrix['rows']:
        ws.cell(row=row_num, column=1).value = row['field_name']
        for offset, amount in enumerate(row['cells'], 2):
            cell = ws.cell(row=row_num, column=offset)
            cell.value = amount
            cell.number_format = AMOUNT_FORMAT
        total = ws.cell(row=row_num, column=len(headers))
        total.value = row['total']
        total.number_format = AMOUNT_FORMAT
        row_num += 1

    ws.cell(row=row_num, column=1).value = 'Total'
    ws.cell(row=row_num, column=1).font = Font(bold=True)
    for offset, amount in enumerate(matrix['column_totals'], 2):
        cell = ws.cell(row=row_num, column=offset)
        cell.value = amount
        cell.number_format = AMOUNT_FORMAT
        cell.font = Font(bold=True)
    grand = ws.cell(row=row_num, column=len(headers))
    grand.value = matrix['grand_total']
    grand.number_format = AMOUNT_FORMAT
    grand.font = Font(bold=True)

    ws.column_dimensions['A'].width = 28
    for col_num in range(2, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col_num)].width = 18
    ws.freeze_panes = 'B3'
    return wb


def period_report_response(project: Project, matrix: Dict[str, Any]) -> HttpResponse:
    """Excel download of the period matrix."""
    wb = build_period_workbook(project, matrix)

    timestamp = timezone.now().strftime('%Y%m%d_%H%M%S')
    filename = f'period_report_{slugify(project.name) or project.pk}_{timestamp}.xlsx'

    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    wb.save(response)
    return response
