import pytest

from catalog_admin.errors import ConflictError, NetworkError, NotFoundError
from catalog_admin.extensions import db
from catalog_admin.models import Category, Product
from catalog_admin.repositories.sql import SQLCategoryRepository


def test_memory_list_all_orders_by_sort_order_then_name(memory_repository):
    names = [c.name for c in memory_repository.list_all()]

    assert names == ["Electronics", "Garden Tools", "Phones", "Home & Garden", "Laptops", "Archived"]


def test_memory_get_categories_filters_and_pages(memory_repository):
    roots = memory_repository.get_categories({"parent_id": None})

    assert [c.name for c in roots.categories] == ["Electronics", "Home & Garden", "Archived"]
    assert roots.total == 3

    page = memory_repository.get_categories({"page": 2, "limit": 4})
    assert len(page.categories) == 2
    assert page.total_pages == 2

    inactive = memory_repository.get_categories({"status": "inactive"})
    assert [c.id for c in inactive.categories] == [3, 6]


def test_memory_get_category_missing(memory_repository):
    with pytest.raises(NotFoundError) as excinfo:
        memory_repository.get_category(99)

    assert excinfo.value.message == "Category 99 not found"


def test_memory_subcategories(memory_repository):
    assert [c.name for c in memory_repository.get_subcategories(1)] == ["Phones", "Laptops"]
    assert memory_repository.get_subcategories(6) == []


def test_memory_product_counts_skip_empty_categories(memory_repository):
    memory_repository.set_product_count(6, 0)

    assert memory_repository.count_products_by_category() == {2: 3, 3: 1, 5: 2}


def test_memory_categories_with_stats(memory_repository):
    stats = {c.id: c for c in memory_repository.get_categories_with_stats()}

    assert stats[1].subcategory_count == 2
    assert stats[2].product_count == 3


def test_memory_delete_category_refuses_blocked(memory_repository):
    with pytest.raises(ConflictError):
        memory_repository.delete_category(4)

    memory_repository.delete_category(6)
    assert 6 not in [c.id for c in memory_repository.list_all()]


@pytest.fixture
def sql_repository(sql_app):
    repository = SQLCategoryRepository()
    home = repository.create_category({"name": "Home Services", "sort_order": 1})
    plumbing = repository.create_category(
        {"name": "Plumbing", "parent_id": home.id, "description": "Pipes and drains"}
    )
    repository.create_category({"name": "Cleaning", "parent_id": home.id, "status": "inactive"})
    db.session.add_all(
        [
            Product(name="Drain unblocking", category_id=plumbing.id),
            Product(name="Leak repair", category_id=plumbing.id),
        ]
    )
    db.session.commit()
    return repository


def test_sql_create_and_get(sql_repository):
    created = sql_repository.create_category({"name": "Painting", "slug": "painting"})

    loaded = sql_repository.get_category(created.id)

    assert loaded.name == "Painting"
    assert loaded.slug == "painting"
    assert loaded.status == "active"
    assert loaded.created_at is not None


def test_sql_list_all_ordering(sql_repository):
    assert [c.name for c in sql_repository.list_all()] == ["Cleaning", "Plumbing", "Home Services"]


def test_sql_get_categories_filters(sql_repository):
    home = sql_repository.get_categories({"parent_id": None}).categories[0]

    children = sql_repository.get_categories({"parent_id": home.id, "limit": 1})

    assert children.total == 2
    assert len(children.categories) == 1
    assert children.total_pages == 2
    assert sql_repository.get_categories({"status": "inactive"}).categories[0].name == "Cleaning"


def test_sql_update_and_missing(sql_repository):
    plumbing = next(c for c in sql_repository.list_all() if c.name == "Plumbing")

    updated = sql_repository.update_category(plumbing.id, {"status": "inactive", "sort_order": 4})

    assert updated.status == "inactive"
    assert updated.sort_order == 4
    with pytest.raises(NotFoundError):
        sql_repository.update_category(999, {"name": "Ghost"})


def test_sql_counts_products(sql_repository):
    plumbing = next(c for c in sql_repository.list_all() if c.name == "Plumbing")

    assert sql_repository.count_products_by_category() == {plumbing.id: 2}


def test_sql_can_delete(sql_repository):
    by_name = {c.name: c for c in sql_repository.list_all()}

    assert sql_repository.can_delete_category(by_name["Plumbing"].id).reason == (
        "Cannot delete category that contains products"
    )
    assert sql_repository.can_delete_category(by_name["Home Services"].id).reason == (
        "Cannot delete category that has subcategories"
    )
    assert sql_repository.can_delete_category(by_name["Cleaning"].id).can_delete is True


def test_sql_bulk_delete_parent_with_children(sql_repository):
    Product.query.delete()
    db.session.commit()
    by_name = {c.name: c.id for c in sql_repository.list_all()}

    deleted = sql_repository.bulk_delete_categories(list(by_name.values()))

    assert deleted[-1] == by_name["Home Services"]
    assert Category.query.count() == 0


def test_sql_bulk_delete_rolls_back_when_blocked(sql_repository):
    ids = [c.id for c in sql_repository.list_all()]

    with pytest.raises(ConflictError):
        sql_repository.bulk_delete_categories(ids)

    assert Category.query.count() == 3


def test_sql_failures_become_network_errors(sql_repository):
    db.drop_all()

    with pytest.raises(NetworkError):
        sql_repository.list_all()
