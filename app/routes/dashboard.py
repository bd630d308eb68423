from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlmodel import Session, func, select
from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.category import Category
from app.models.order import Order, OrderStatus
from app.models.order_item import OrderItem, OrderItemStatus
from app.models.product import Product
from app.models.user import User
import io
from datetime import datetime, timedelta
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side


router = APIRouter()


def build_summary(session: Session, days: int) -> dict:
    now = datetime.utcnow()
    since = now - timedelta(days=days)

    total_products = session.exec(select(func.count(Product.id))).one()
    in_stock = session.exec(
        select(func.count(Product.id)).where(Product.status == True, Product.stock > 0)  # noqa: E712
    ).one()
    out_of_stock = session.exec(
        select(func.count(Product.id)).where(Product.status == True, Product.stock <= 0)  # noqa: E712
    ).one()
    new_products = session.exec(
        select(func.count(Product.id)).where(Product.created_at >= since)
    ).one()

    total_categories = session.exec(select(func.count(Category.id))).one()
    top_categories = session.exec(
        select(Category.id, Category.title, func.count(Product.id))
        .join(Product, Product.category_id == Category.id)
        .group_by(Category.id, Category.title)
        .order_by(func.count(Product.id).desc(), Category.id)
        .limit(3)
    ).all()

    total_orders = session.exec(select(func.count(Order.id))).one()
    by_status = dict(session.exec(
        select(Order.status, func.count(Order.id)).group_by(Order.status)
    ).all())

    top_selling = session.exec(
        select(
            OrderItem.product_id,
            OrderItem.title,
            func.sum(OrderItem.quantity),
            func.sum(OrderItem.total),
        )
        .join(Order, Order.id == OrderItem.order_id)
        .where(Order.created_at >= since, OrderItem.status != OrderItemStatus.CANCELLED.value)
        .group_by(OrderItem.product_id, OrderItem.title)
        .order_by(func.sum(OrderItem.quantity).desc())
        .limit(5)
    ).all()

    return {
        "products": {
            "total": total_products,
            "in_stock": in_stock,
            "out_of_stock": out_of_stock,
            "new": new_products,
        },
        "categories": {
            "total": total_categories,
            "top": [
                {"id": cid, "title": title, "products": count}
                for cid, title, count in top_categories
            ],
        },
        "orders": {
            "total": total_orders,
            "by_status": {s.value: by_status.get(s.value, 0) for s in OrderStatus},
        },
        "top_selling": [
            {"product_id": pid, "title": title, "sold": sold or 0, "revenue": round(revenue or 0, 2)}
            for pid, title, sold, revenue in top_selling
        ],
        "meta": {"days": days, "generated_at": now},
    }


@router.get("/summary")
def dashboard_summary(
    days: int = Query(30, ge=1, le=365),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    return build_summary(session, days)


@router.get("/export")
def export_dashboard(
    days: int = Query(30, ge=1, le=365),
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    data = build_summary(session, days)

    wb = Workbook()
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill("solid", fgColor="4F81BD")
    side = Side(style="thin")
    thin = Border(left=side, right=side, top=side, bottom=side)
    center = Alignment(horizontal="center")

    def header(ws, titles):
        ws.append(titles)
        for cell in ws[1]:
            cell.font = header_font
            cell.fill = header_fill
            cell.border = thin
            cell.alignment = center

    # Sheet 1: overview
    ws1 = wb.active
    ws1.title = "Overview"
    header(ws1, ["Metric", "Value"])
    for key, value in data["products"].items():
        ws1.append([f"Products {key.replace('_', ' ')}", value])
    ws1.append(["Categories total", data["categories"]["total"]])
    ws1.append(["Orders total", data["orders"]["total"]])
    ws1.append(["Window (days)", days])
    ws1.column_dimensions["A"].width = 28

    # Sheet 2: orders by status
    ws2 = wb.create_sheet("Orders")
    header(ws2, ["Status", "Orders"])
    for status, count in data["orders"]["by_status"].items():
        ws2.append([status, count])

    # Sheet 3: top categories
    ws3 = wb.create_sheet("Top Categories")
    header(ws3, ["Category", "Products"])
    for row in data["categories"]["top"]:
        ws3.append([row["title"], row["products"]])

    # Sheet 4: top selling products
    ws4 = wb.create_sheet("Top Selling")
    header(ws4, ["Product ID", "Title", "Sold", "Revenue"])
    for row in data["top_selling"]:
        ws4.append([row["product_id"], row["title"], row["sold"], row["revenue"]])
    ws4.column_dimensions["B"].width = 40

    buffer = io.BytesIO()
    wb.save(buffer)
    buffer.seek(0)

    filename = f"dashboard_{datetime.utcnow().date()}.xlsx"

    return StreamingResponse(
        buffer,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
