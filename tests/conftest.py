from datetime import datetime, timedelta

import pytest

from catalog_admin import create_app
from catalog_admin.extensions import db
from catalog_admin.records import CategoryRecord
from catalog_admin.repositories.memory import InMemoryCategoryRepository


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def make_category():
    def _make(category_id, name, parent_id=None, **fields):
        fields.setdefault("created_at", BASE_TIME + timedelta(days=category_id))
        return CategoryRecord(id=category_id, name=name, parent_id=parent_id, **fields)

    return _make


@pytest.fixture
def sample_categories(make_category):
    return [
        make_category(1, "Electronics", sort_order=1, description="Gadgets and devices"),
        make_category(2, "Phones", 1, sort_order=1, description="Smartphones"),
        make_category(3, "Laptops", 1, sort_order=2, status="inactive"),
        make_category(4, "Home & Garden", sort_order=2, description="Furniture and outdoor"),
        make_category(5, "Garden Tools", 4, sort_order=1),
        make_category(6, "Archived", sort_order=3, status="inactive"),
    ]


@pytest.fixture
def sample_product_counts():
    return {2: 3, 3: 1, 5: 2}


@pytest.fixture
def memory_repository(sample_categories, sample_product_counts):
    return InMemoryCategoryRepository(sample_categories, sample_product_counts)


@pytest.fixture
def app(memory_repository):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "CATEGORY_REPOSITORY": memory_repository,
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sql_app():
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "CATEGORY_DATA_SOURCE": "sql",
        }
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
