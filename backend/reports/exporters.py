"""
Excel (openpyxl) and PDF (reportlab) renderings of report layouts.

Both exporters take a layout from `tables.py`, the company name and the
period subtitle, and return the file as bytes.
"""
import re
from io import BytesIO

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import inch
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from .tables import MONEY, NUMBER

MONEY_FORMAT = '"Rs. "#,##0.00'
HEADER_FONT = Font(bold=True, color='FFFFFF')
HEADER_FILL = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
TITLE_FONT = Font(bold=True, size=14)
SUBTITLE_FONT = Font(bold=True, size=12)
SUMMARY_FONT = Font(bold=True)
FOOTER_FONT = Font(italic=True, size=9, color='808080')

EXCEL_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_CONTENT_TYPE = 'application/pdf'


def generated_on():
    return f"Generated on {timezone.localtime().strftime('%d %b %Y %H:%M')}"


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _display(value, kind):
    if value is None:
        return ''
    if kind == MONEY and _is_number(value):
        return f"Rs. {value:,.2f}"
    if kind == NUMBER and _is_number(value):
        return f"{value:g}" if isinstance(value, float) else str(value)
    return str(value)


def build_excel(layout, company_name, subtitle):
    wb = Workbook()
    ws = wb.active
    ws.title = re.sub(r'[\\/*?:\[\]]', '-', layout['title'])[:31]
    columns = layout['columns']
    width = len(columns)

    ws.cell(row=1, column=1, value=company_name).font = TITLE_FONT
    ws.cell(row=2, column=1, value=layout['title']).font = SUBTITLE_FONT
    ws.cell(row=3, column=1, value=subtitle)

    header_row = 5
    for index, column in enumerate(columns, start=1):
        cell = ws.cell(row=header_row, column=index, value=column['header'])
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center', vertical='center')

    row_number = header_row
    for row in layout['rows']:
        row_number += 1
        for index, column in enumerate(columns, start=1):
            value = row.get(column['key'], '')
            cell = ws.cell(row=row_number, column=index, value=value if value is not None else '')
            if column['kind'] == MONEY and _is_number(value):
                cell.number_format = MONEY_FORMAT

    # summary label sits in the second-to-last column, value in the last
    if layout['summary']:
        row_number += 1
        label_column = max(1, width - 1)
        for label, value in layout['summary']:
            row_number += 1
            ws.cell(row=row_number, column=label_column, value=label).font = SUMMARY_FONT
            cell = ws.cell(row=row_number, column=width, value=value)
            cell.font = SUMMARY_FONT
            if _is_number(value):
                cell.number_format = MONEY_FORMAT

    ws.cell(row=row_number + 2, column=1, value=generated_on()).font = FOOTER_FONT

    for index, column in enumerate(columns, start=1):
        max_len = len(column['header'])
        for row in layout['rows']:
            max_len = max(max_len, len(_display(row.get(column['key']), column['kind'])))
        ws.column_dimensions[get_column_letter(index)].width = max(max_len + 2, column['width'])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _fit(text, font, size, max_width):
    if stringWidth(text, font, size) <= max_width:
        return text
    while text and stringWidth(text + '...', font, size) > max_width:
        text = text[:-1]
    return text + '...'


class _PdfTable:
    """Draws a report table onto a canvas, starting new pages as rows run out"""
    MARGIN = 0.6 * inch
    ROW_HEIGHT = 0.22 * inch

    def __init__(self, pdf, layout, page_size):
        self.pdf = pdf
        self.layout = layout
        self.page_width, self.page_height = page_size
        usable = self.page_width - 2 * self.MARGIN
        total_width = sum(column['width'] for column in layout['columns'])
        self.positions = []
        x = self.MARGIN
        for column in layout['columns']:
            span = usable * column['width'] / total_width
            self.positions.append((x, span))
            x += span
        self.right_edge = self.MARGIN + usable

    def draw_header(self, y):
        self.pdf.setFont('Helvetica-Bold', 9)
        for (x, span), column in zip(self.positions, self.layout['columns']):
            text = _fit(column['header'], 'Helvetica-Bold', 9, span - 4)
            if column['kind'] in (MONEY, NUMBER):
                self.pdf.drawRightString(x + span - 2, y, text)
            else:
                self.pdf.drawString(x + 2, y, text)
        y -= 0.08 * inch
        self.pdf.line(self.MARGIN, y, self.right_edge, y)
        self.pdf.setFont('Helvetica', 8)
        return y - self.ROW_HEIGHT

    def draw_rows(self, y):
        y = self.draw_header(y)
        for row in self.layout['rows']:
            if y < self.MARGIN + self.ROW_HEIGHT:
                self.pdf.showPage()
                y = self.draw_header(self.page_height - self.MARGIN)
            for (x, span), column in zip(self.positions, self.layout['columns']):
                text = _fit(_display(row.get(column['key']), column['kind']), 'Helvetica', 8, span - 4)
                if column['kind'] in (MONEY, NUMBER):
                    self.pdf.drawRightString(x + span - 2, y, text)
                else:
                    self.pdf.drawString(x + 2, y, text)
            y -= self.ROW_HEIGHT
        return y


def build_pdf(layout, company_name, subtitle):
    buffer = BytesIO()
    page_size = landscape(A4)
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle(layout['title'])
    width, height = page_size
    margin = _PdfTable.MARGIN

    pdf.setFont('Helvetica-Bold', 16)
    pdf.drawString(margin, height - margin, company_name)
    pdf.setFont('Helvetica-Bold', 13)
    pdf.drawString(margin, height - margin - 0.3 * inch, layout['title'])
    pdf.setFont('Helvetica', 10)
    pdf.drawString(margin, height - margin - 0.55 * inch, subtitle)

    table = _PdfTable(pdf, layout, page_size)
    y = table.draw_rows(height - margin - 0.95 * inch)

    if layout['summary']:
        y -= 0.1 * inch
        if y < margin + (len(layout['summary']) + 1) * _PdfTable.ROW_HEIGHT:
            pdf.showPage()
            y = height - margin
        pdf.line(width - margin - 3.5 * inch, y + 0.12 * inch, width - margin, y + 0.12 * inch)
        pdf.setFont('Helvetica-Bold', 9)
        for label, value in layout['summary']:
            y -= 0.05 * inch
            pdf.drawRightString(width - margin - 1.6 * inch, y, label)
            pdf.drawRightString(width - margin, y, _display(value, MONEY))
            y -= _PdfTable.ROW_HEIGHT

    pdf.setFont('Helvetica-Oblique', 8)
    pdf.drawString(margin, margin / 2, generated_on())
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
