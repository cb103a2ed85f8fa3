"""
Table definitions

Used only to create the schema; all reads and writes go through the
hand-written SQL in ``storefront.repositories``.
"""
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

UUID_LENGTH = 36

users = Table(
    "users",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("email_address", String(255), nullable=False, unique=True),
    Column("first_name", String(100), nullable=False),
    Column("last_name", String(100), nullable=False),
    Column("phone_number", String(30)),
    Column("password_hash", String(255), nullable=False),
    Column("role", String(20), nullable=False, server_default="customer"),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

categories = Table(
    "categories",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("parent_category_id", String(UUID_LENGTH), ForeignKey("categories.id")),
    Column("category_name", String(100), nullable=False, unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

products = Table(
    "products",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("category_id", String(UUID_LENGTH), ForeignKey("categories.id"), index=True),
    Column("name", String(255), nullable=False),
    Column("sku", String(100), unique=True),
    Column("description", Text),
    Column("price", Numeric(12, 2), nullable=False),
    Column("stock_quantity", Integer, nullable=False, server_default="0"),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("images", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

addresses = Table(
    "addresses",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False, index=True),
    Column("address_line", String(255), nullable=False),
    Column("city", String(100), nullable=False),
    Column("region", String(100)),
    Column("country", String(100), nullable=False),
    Column("postal_code", String(20)),
    Column("is_default", Boolean, nullable=False, server_default="0"),
    Column("address_type", String(20)),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

payment_methods = Table(
    "payment_methods",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False, index=True),
    Column("payment_type", String(50), nullable=False),
    Column("provider", String(100)),
    Column("account_number", String(64)),
    Column("expiry_date", DateTime(timezone=True)),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

shipping_methods = Table(
    "shipping_methods",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("description", String(500)),
    Column("price", Numeric(12, 2), nullable=False),
    Column("estimated_days", Integer),
    Column("is_active", Boolean, nullable=False, server_default="1"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

customer_orders = Table(
    "customer_orders",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False, index=True),
    Column("order_number", String(50), nullable=False, unique=True),
    Column("status", String(30), nullable=False, index=True),
    Column("payment_status", String(30), nullable=False),
    Column("payment_method_id", String(UUID_LENGTH)),
    Column("shipping_method_id", String(UUID_LENGTH)),
    Column("shipping_address_id", String(UUID_LENGTH)),
    Column("subtotal", Numeric(12, 2), nullable=False),
    Column("shipping_cost", Numeric(12, 2), nullable=False, server_default="0"),
    Column("total", Numeric(12, 2), nullable=False),
    Column("notes", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
    Column("cancelled_at", DateTime(timezone=True)),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("order_id", String(UUID_LENGTH), ForeignKey("customer_orders.id"), nullable=False, index=True),
    Column("product_id", String(UUID_LENGTH), nullable=False, index=True),
    Column("product_name", String(255)),
    Column("product_sku", String(100)),
    Column("unit_price", Numeric(12, 2), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

product_reviews = Table(
    "product_reviews",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False),
    Column("product_id", String(UUID_LENGTH), ForeignKey("products.id"), nullable=False, index=True),
    Column("order_item_id", String(UUID_LENGTH)),
    Column("rating", Integer, nullable=False),
    Column("title", String(200)),
    Column("comment", String(2000)),
    Column("is_verified_purchase", Boolean, nullable=False, server_default="0"),
    Column("is_approved", Boolean, nullable=False, server_default="1"),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
    UniqueConstraint("user_id", "product_id", name="uq_review_user_product"),
)

wishlist_items = Table(
    "wishlist_items",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False, index=True),
    Column("product_id", String(UUID_LENGTH), ForeignKey("products.id"), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
)

shopping_carts = Table(
    "shopping_carts",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("user_id", String(UUID_LENGTH), ForeignKey("users.id"), nullable=False, unique=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

cart_items = Table(
    "cart_items",
    metadata,
    Column("id", String(UUID_LENGTH), primary_key=True),
    Column("cart_id", String(UUID_LENGTH), ForeignKey("shopping_carts.id"), nullable=False, index=True),
    Column("product_id", String(UUID_LENGTH), ForeignKey("products.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("added_at", DateTime(timezone=True), nullable=False),
)
