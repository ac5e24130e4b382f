# backend/services/export_service.py
"""CSV export of approved/completed orders for the purchasing team."""

import csv
import io
import re

from models.order_model import Order
from schemas.orders import OrderStatus
from services.errors import ValidationError

EXPORTABLE_STATUSES = (OrderStatus.APPROVED.value, OrderStatus.COMPLETED.value)
CSV_HEADER = ["Produto", "Quantidade Solicitada", "Quantidade Aprovada"]
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"


def export_order_csv(order: Order) -> str:
    """
    Render one order as:

        Cliente: <client>
        Supervisor: <supervisor>

        Produto,Quantidade Solicitada,Quantidade Aprovada
        <name>,<requested>,<approved or requested>
    """
    if order.status not in EXPORTABLE_STATUSES:
        raise ValidationError("Somente pedidos aprovados ou concluídos podem ser exportados.")

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([f"Cliente: {order.client_name}"])
    writer.writerow([f"Supervisor: {order.supervisor_name}"])
    writer.writerow([])
    writer.writerow(CSV_HEADER)
    for item in order.products or []:
        approved = item.get("approvedQuantity")
        writer.writerow([
            item["name"],
            item["quantity"],
            approved if approved is not None else item["quantity"],
        ])
    return buf.getvalue()


def export_filename(order: Order) -> str:
    client = re.sub(r"\s", "_", order.client_name or "")
    return f"pedido_{client}_{order.id[:8]}.csv"
