"""
Back-office catalog entities.

Shapes of the records the REST API returns and accepts for suppliers,
categories, products, customers, orders, shipping zones and supplier invoices.
"""

from pydantic import Field
from typing import Optional
from enum import Enum

from models.base import BaseSchema, TimestampMixin


class OrderStatus(str, Enum):
    """Sales order lifecycle."""
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class CustomerType(str, Enum):
    RETAIL = "RETAIL"
    WHOLESALE = "WHOLESALE"


# ===================
# SUPPLIERS / CATEGORIES
# ===================

class Supplier(BaseSchema):
    id: str
    name: str
    phone: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None


class SupplierCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    phone: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None


class SupplierUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None


class Category(BaseSchema):
    id: str
    name: str
    slug: str = ""
    order: int = 0


# ===================
# PRODUCTS
# ===================

class Product(TimestampMixin):
    """Catalog product as returned by the API."""

    id: str
    code: str
    name: str
    price_retail: float
    price_wholesale: Optional[float] = None
    cost_price: Optional[float] = None
    image_url: Optional[str] = None
    size: Optional[str] = None
    is_active: bool = True
    is_visible: bool = True
    stock: int = 0
    supplier_id: Optional[str] = None
    supplier: Optional[Supplier] = None
    category_id: Optional[str] = None
    category: Optional[Category] = None


class ProductCreate(BaseSchema):
    """
    Create a new product.

    Required: code, name, price_retail
    """

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1)
    price_retail: float = Field(..., gt=0)
    price_wholesale: Optional[float] = Field(None, gt=0)
    cost_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    supplier_id: Optional[str] = None
    category_id: Optional[str] = None


class ProductUpdate(BaseSchema):
    """
    Update existing product.

    All fields optional - only provided fields are updated.
    """

    code: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1)
    price_retail: Optional[float] = Field(None, gt=0)
    price_wholesale: Optional[float] = Field(None, gt=0)
    cost_price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = None
    supplier_id: Optional[str] = None
    category_id: Optional[str] = None
    is_active: Optional[bool] = None
    is_visible: Optional[bool] = None


# ===================
# CUSTOMERS
# ===================

class CustomerAddress(BaseSchema):
    id: str
    label: str
    street: str
    city: str
    postal_code: str
    province: str
    country: Optional[str] = None
    notes: Optional[str] = None
    is_default: bool = False
    customer_id: str


class Customer(BaseSchema):
    id: str
    phone: str
    name: str
    type: CustomerType = CustomerType.RETAIL
    notes: Optional[str] = None
    is_active: bool = True
    addresses: list[CustomerAddress] = Field(default_factory=list)
    created_at: Optional[str] = None


class CustomerCreate(BaseSchema):
    phone: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: Optional[CustomerType] = None
    notes: Optional[str] = None


class CustomerUpdate(BaseSchema):
    phone: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = Field(None, min_length=1)
    type: Optional[CustomerType] = None
    notes: Optional[str] = None


# ===================
# ORDERS
# ===================

class OrderProduct(BaseSchema):
    """Product snapshot nested in an order item."""
    id: str
    code: str = ""
    name: str = ""
    cost_price: Optional[float] = None


class OrderItem(BaseSchema):
    id: str
    order_id: str
    product_id: str
    product: OrderProduct
    quantity: int
    unit_price: float


class Order(TimestampMixin):
    id: str
    number: str
    customer_id: str
    customer: Optional[Customer] = None
    shipping_address_id: Optional[str] = None
    status: OrderStatus
    notes: Optional[str] = None
    items: list[OrderItem] = Field(default_factory=list)


class OrderItemCreate(BaseSchema):
    product_id: str
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseSchema):
    customer_id: str
    shipping_address_id: Optional[str] = None
    items: list[OrderItemCreate] = Field(..., min_length=1)
    notes: Optional[str] = None


# ===================
# SHIPPING ZONES
# ===================

class ShippingZone(BaseSchema):
    id: str
    name: str
    provinces: list[str] = Field(default_factory=list)
    price: float = 0
    free_shipping_threshold: Optional[float] = None
    is_active: bool = True


class ShippingZoneCreate(BaseSchema):
    name: str = Field(..., min_length=1)
    provinces: list[str] = Field(default_factory=list)
    price: float = Field(..., ge=0)
    free_shipping_threshold: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ShippingZoneUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1)
    provinces: Optional[list[str]] = None
    price: Optional[float] = Field(None, ge=0)
    free_shipping_threshold: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


# ===================
# SUPPLIER INVOICES
# ===================

class SupplierOrderItem(BaseSchema):
    id: str
    product_id: str
    quantity: int
    unit_cost: float
    total_cost: float


class SupplierOrder(BaseSchema):
    """Supplier invoice registered by an import."""

    id: str
    invoice_number: str
    supplier_id: str
    invoice_date: str
    total_amount: float
    shipping_cost: float = 0
    currency: str = "EUR"
    pdf_url: Optional[str] = None
    notes: Optional[str] = None
    item_count: int = 0
    items: list[SupplierOrderItem] = Field(default_factory=list)
    created_at: Optional[str] = None


class SupplierOrderUpdate(BaseSchema):
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    shipping_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None


class DashboardStats(BaseSchema):
    orders_today: int = 0
    total_today: float = 0
    pending_orders: int = 0
    margin_today: Optional[float] = None
    paid_orders: int = 0
    shipped_orders: int = 0
    customers_count: int = 0
    products_count: int = 0
