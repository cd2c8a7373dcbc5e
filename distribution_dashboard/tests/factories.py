"""
Record builders shared by the test modules.
"""
from datetime import datetime

from distribution_dashboard.models import (
    Warehouse, Retailer, ProductCategory, Product, WarehouseInventory,
    Order, OrderItem, OrderStatus, PaymentStatus, PaymentMethod, DemandForecast
)


def make_warehouse(id='w1', name='Kochi Central', location='Kochi', latitude=10.0, longitude=76.3,
                   coverage_radius_km=50.0):
    return Warehouse(id=id, name=name, location=location, latitude=latitude, longitude=longitude,
                     coverage_radius_km=coverage_radius_km)


def make_retailer(id='r1', shop_name='Bright Lights', credit_limit=10000.0, credit_used=0.0,
                  credit_score=80, latitude=10.1, longitude=76.3, assigned_warehouse_id='w1'):
    return Retailer(id=id, shop_name=shop_name, address='MG Road', credit_limit=credit_limit,
                    credit_used=credit_used, credit_score=credit_score, latitude=latitude,
                    longitude=longitude, assigned_warehouse_id=assigned_warehouse_id)


def make_category(id='c1', name='LED Bulbs'):
    return ProductCategory(id=id, name=name)


def make_product(id='p1', name='9W LED Bulb', price=100.0, category=None, moq=10):
    product = Product(id=id, name=name, price=price, moq=moq,
                      category_id=category.id if category is not None else None)
    product.category = category
    return product


def make_inventory(id='i1', quantity=100, threshold=20, product=None, warehouse=None,
                   warehouse_id=None):
    item = WarehouseInventory(
        id=id,
        quantity=quantity,
        low_stock_threshold=threshold,
        product_id=product.id if product is not None else 'p1',
        warehouse_id=warehouse_id or (warehouse.id if warehouse is not None else 'w1')
    )
    item.product = product
    item.warehouse = warehouse
    return item


def make_order(id='o1', status=OrderStatus.PENDING, total=1000.0, payment_status=PaymentStatus.PENDING,
               order_date=None, delivered_at=None, retailer=None, warehouse=None, items=None):
    order = Order(
        id=id,
        order_number=f"ORD-{id}",
        status=status,
        total_amount=total,
        payment_method=PaymentMethod.CREDIT,
        payment_status=payment_status,
        order_date=order_date or datetime(2024, 1, 15, 10, 0),
        delivered_at=delivered_at,
        retailer_id=retailer.id if retailer is not None else 'r1',
        warehouse_id=warehouse.id if warehouse is not None else 'w1'
    )
    order.retailer = retailer
    order.warehouse = warehouse
    order.items = items or []
    return order


def make_order_item(product, quantity=2):
    item = OrderItem(product_id=product.id, quantity=quantity, unit_price=product.price,
                     subtotal=quantity * product.price)
    item.product = product
    return item


def make_forecast(id, forecast_date, quantity):
    return DemandForecast(id=id, product_id='p1', warehouse_id='w1', forecast_date=forecast_date,
                          predicted_quantity=quantity)
