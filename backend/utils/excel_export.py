from io import BytesIO
from typing import Iterable, Optional

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from utils.formatting import STATUS_ADEQUATE, format_inventory_display_id, format_peso
from utils.time_utils import now

XLSX_MEDIA_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4F6228", end_color="4F6228", fill_type="solid")

ITEM_HEADERS = [
    "Item ID", "Name", "Category", "Current Stock", "Min Stock", "Unit", "Status",
    "Supplier", "Last Restocked", "Price", "Location", "Expiry Date", "Description",
]
ALERT_HEADERS = ["Item ID", "Name", "Category", "Current Stock", "Min Stock", "Status"]


def _style_header(ws, row: int, width: int):
    for col in range(1, width + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")


def _autosize(ws):
    for index, column in enumerate(ws.columns, start=1):
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        ws.column_dimensions[get_column_letter(index)].width = min(max(longest + 2, 10), 60)


def _display_id(item) -> str:
    return format_inventory_display_id(item.id, item.created_at, item.last_restocked, item.display_id)


def build_inventory_workbook(items: Iterable, stats=None, exported_by: Optional[str] = None) -> BytesIO:
    """Summary, Inventory Items and (when any) Stock Alerts sheets as an in-memory xlsx."""
    wb = Workbook()
    sorted_items = sorted(items, key=lambda item: item.name.lower())

    ws = wb.active
    ws.title = "Summary"
    ws.append(["Inventory Report Summary"])
    ws["A1"].font = Font(bold=True, size=14)
    ws.append(["Generated:", now().strftime("%Y-%m-%d %H:%M")])
    ws.append(["Exported by:", exported_by or "Unknown"])
    ws.append([])
    if stats is not None:
        ws.append(["Metric", "Value"])
        _style_header(ws, ws.max_row, 2)
        ws.append(["Total Items", stats.total_items])
        ws.append(["Low Stock Alerts", stats.low_stock_alerts])
        ws.append(["Critical Items", stats.critical_items])
        ws.append(["Monthly Spend", format_peso(stats.monthly_spend)])
    _autosize(ws)

    ws = wb.create_sheet("Inventory Items")
    ws.append(ITEM_HEADERS)
    _style_header(ws, 1, len(ITEM_HEADERS))
    for item in sorted_items:
        ws.append([
            _display_id(item),
            item.name,
            item.category,
            item.current_stock,
            item.min_stock,
            item.unit,
            item.status.capitalize(),
            item.supplier,
            item.last_restocked.isoformat() if item.last_restocked else "",
            format_peso(item.price),
            item.location or "",
            item.expiry_date.isoformat() if item.expiry_date else "",
            item.description or "",
        ])
    _autosize(ws)

    alert_items = [item for item in sorted_items if item.status != STATUS_ADEQUATE]
    if alert_items:
        ws = wb.create_sheet("Stock Alerts")
        ws.append(ALERT_HEADERS)
        _style_header(ws, 1, len(ALERT_HEADERS))
        for item in alert_items:
            ws.append([
                _display_id(item),
                item.name,
                item.category,
                item.current_stock,
                item.min_stock,
                item.status.capitalize(),
            ])
        _autosize(ws)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output
