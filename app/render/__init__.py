from .items import render_items
from .report import render_report
from .status import render_status

__all__ = [
    "render_items",
    "render_report",
    "render_status",
]
