# distribution_dashboard/models.py
"""Typed records for the rows served by the data provider.

The models mirror the provider's tables. They are built by
``distribution_dashboard.db.mapping`` from fetched rows and are never bound
to a session: each fetch produces a fresh snapshot.
"""
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, Text, Enum, JSON
from sqlalchemy.orm import declarative_base, relationship
import enum

Base = declarative_base()


class UserRoleType(enum.Enum):
    COMPANY = 'company'
    RETAILER = 'retailer'
    WAREHOUSE = 'warehouse'


class OrderStatus(enum.Enum):
    """Enum for order statuses.

    Values:
        PENDING: Order received, not yet processed
        PROCESSING: Order accepted by the warehouse
        PICKED: Items picked from the shelves
        PACKED: Items packed and awaiting dispatch
        OUT_FOR_DELIVERY: Order on its way to the retailer
        DELIVERED: Order received by the retailer (terminal)
        CANCELLED: Order cancelled (terminal)
    """
    PENDING = 'pending'
    PROCESSING = 'processing'
    PICKED = 'picked'
    PACKED = 'packed'
    OUT_FOR_DELIVERY = 'out_for_delivery'
    DELIVERED = 'delivered'
    CANCELLED = 'cancelled'

    def __str__(self):
        """Return the string value of the enum."""
        return self.value

    @property
    def label(self) -> str:
        """Display label, e.g. 'OUT FOR DELIVERY'."""
        return self.value.replace('_', ' ').upper()

    @classmethod
    def from_string(cls, value: str) -> 'OrderStatus':
        """Create an OrderStatus from a string value.

        Args:
            value: String value ('pending', 'processing', ...)

        Returns:
            OrderStatus enum value

        Raises:
            ValueError if the string value is not valid
        """
        try:
            return cls(value)
        except ValueError:
            valid = ', '.join(status.value for status in cls)
            raise ValueError(f"Invalid order status: {value}. Valid values are: {valid}")


class PaymentMethod(enum.Enum):
    CREDIT = 'credit'
    UPI = 'upi'
    BANK_TRANSFER = 'bank_transfer'
    COD = 'cod'


class PaymentStatus(enum.Enum):
    PENDING = 'pending'
    PAID = 'paid'
    OVERDUE = 'overdue'


class MovementType(enum.Enum):
    INCOMING = 'incoming'
    OUTGOING = 'outgoing'
    TRANSFER = 'transfer'
    ADJUSTMENT = 'adjustment'


class PaymentRecordStatus(enum.Enum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'


class StockStatus(enum.Enum):
    """Derived stock status of an inventory record. Never stored."""
    LOW = 'Low'
    MEDIUM = 'Medium'
    GOOD = 'Good'


class UserRole(Base):
    __tablename__ = 'user_roles'

    id = Column(String(36), primary_key=True)
    email = Column(String(255), nullable=False)
    role = Column(Enum(UserRoleType))
    full_name = Column(String(255))
    phone = Column(String(32))
    created_at = Column(DateTime)


class Warehouse(Base):
    __tablename__ = 'warehouses'

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255))
    latitude = Column(Float)
    longitude = Column(Float)
    capacity = Column(Integer)
    coverage_radius_km = Column(Float)
    manager_id = Column(String(36))
    created_at = Column(DateTime)


class Retailer(Base):
    __tablename__ = 'retailers'

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey('user_roles.id'))
    shop_name = Column(String(255), nullable=False)
    address = Column(Text)
    latitude = Column(Float)
    longitude = Column(Float)
    assigned_warehouse_id = Column(String(36), ForeignKey('warehouses.id'))

    # Credit
    credit_limit = Column(Float, default=0.0)
    credit_used = Column(Float, default=0.0)
    credit_score = Column(Integer, default=0)  # 0-100

    created_at = Column(DateTime)

    user = relationship("UserRole")
    warehouse = relationship("Warehouse")


class ProductCategory(Base):
    __tablename__ = 'product_categories'

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime)


class Product(Base):
    __tablename__ = 'products'

    id = Column(String(36), primary_key=True)
    category_id = Column(String(36), ForeignKey('product_categories.id'))
    name = Column(String(255), nullable=False)
    description = Column(Text)
    specifications = Column(JSON)
    price = Column(Float, default=0.0)
    moq = Column(Integer, default=1)  # Minimum order quantity
    image_url = Column(Text)
    created_at = Column(DateTime)

    category = relationship("ProductCategory")


class WarehouseInventory(Base):
    __tablename__ = 'warehouse_inventory'

    id = Column(String(36), primary_key=True)
    warehouse_id = Column(String(36), ForeignKey('warehouses.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    quantity = Column(Integer, default=0)
    low_stock_threshold = Column(Integer, default=0)
    last_updated = Column(DateTime)

    product = relationship("Product")
    warehouse = relationship("Warehouse")


class Order(Base):
    __tablename__ = 'orders'

    id = Column(String(36), primary_key=True)
    order_number = Column(String(64), nullable=False)
    retailer_id = Column(String(36), ForeignKey('retailers.id'))
    warehouse_id = Column(String(36), ForeignKey('warehouses.id'))
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING)
    total_amount = Column(Float, default=0.0)

    # Payment
    payment_method = Column(Enum(PaymentMethod))
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING)

    delivery_agent_id = Column(String(36))
    order_date = Column(DateTime)
    expected_delivery = Column(DateTime)
    delivered_at = Column(DateTime)
    created_at = Column(DateTime)

    retailer = relationship("Retailer")
    warehouse = relationship("Warehouse")
    items = relationship("OrderItem", back_populates="order")


class OrderItem(Base):
    __tablename__ = 'order_items'

    id = Column(String(36), primary_key=True)
    order_id = Column(String(36), ForeignKey('orders.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    quantity = Column(Integer, default=0)
    unit_price = Column(Float, default=0.0)
    subtotal = Column(Float, default=0.0)  # quantity * unit_price

    order = relationship("Order", back_populates="items")
    product = relationship("Product")


class StockMovement(Base):
    __tablename__ = 'stock_movements'

    id = Column(String(36), primary_key=True)
    warehouse_id = Column(String(36), ForeignKey('warehouses.id'))
    product_id = Column(String(36), ForeignKey('products.id'))
    movement_type = Column(Enum(MovementType))
    quantity = Column(Integer, default=0)
    reference_type = Column(String(64))
    reference_id = Column(String(36))
    notes = Column(Text)
    created_at = Column(DateTime)

    product = relationship("Product")
    warehouse = relationship("Warehouse")


class Payment(Base):
    __tablename__ = 'payments'

    id = Column(String(36), primary_key=True)
    retailer_id = Column(String(36), ForeignKey('retailers.id'))
    order_id = Column(String(36), ForeignKey('orders.id'))
    amount = Column(Float, default=0.0)
    payment_method = Column(String(32))
    transaction_id = Column(String(128))
    status = Column(Enum(PaymentRecordStatus), default=PaymentRecordStatus.PENDING)
    payment_date = Column(DateTime)
    created_at = Column(DateTime)


class DemandForecast(Base):
    __tablename__ = 'demand_forecasts'

    id = Column(String(36), primary_key=True)
    product_id = Column(String(36), ForeignKey('products.id'))
    warehouse_id = Column(String(36), ForeignKey('warehouses.id'))
    forecast_date = Column(Date)
    predicted_quantity = Column(Integer, default=0)
    confidence_level = Column(Float)
    created_at = Column(DateTime)

    product = relationship("Product")
    warehouse = relationship("Warehouse")
