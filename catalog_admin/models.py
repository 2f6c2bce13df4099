from datetime import datetime

from .extensions import db
from .sample_data import SAMPLE_CATEGORIES, SAMPLE_PRODUCTS


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Category(TimestampMixin, db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    slug = db.Column(db.String(120))
    description = db.Column(db.String(500))
    parent_id = db.Column(db.Integer, db.ForeignKey("categories.id"))
    status = db.Column(db.String(16), nullable=False, default="active")
    sort_order = db.Column(db.Integer, nullable=False, default=0)

    parent = db.relationship("Category", remote_side=[id], backref="children")


class Product(TimestampMixin, db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"))
    is_active = db.Column(db.Boolean, default=True)

    category = db.relationship("Category", backref="products")


def ensure_seed_data() -> int:
    """Insert the sample catalog when no categories exist; returns how many were created."""
    if Category.query.first() is not None:
        return 0

    by_name = {}
    for name, description, parent_name, sort_order in SAMPLE_CATEGORIES:
        parent = by_name.get(parent_name) if parent_name else None
        category = Category(
            name=name,
            description=description,
            parent=parent,
            sort_order=sort_order,
        )
        db.session.add(category)
        by_name[name] = category

    for product_name, category_name in SAMPLE_PRODUCTS:
        db.session.add(Product(name=product_name, category=by_name[category_name]))
    db.session.commit()
    return len(by_name)
