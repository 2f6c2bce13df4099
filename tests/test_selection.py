from catalog_admin.utils.category_list import ListState, query_categories
from catalog_admin.utils.selection import SelectionTracker


def test_toggle_flips_one_id():
    selection = SelectionTracker()

    assert selection.toggle(5) is True
    assert selection.is_selected(5)
    assert selection.toggle(5) is False
    assert not selection.is_selected(5)


def test_select_all_unions_with_existing_selection():
    selection = SelectionTracker([1])

    selection.select_all([2, 3])

    assert selection.selected() == {1, 2, 3}


def test_clear_empties_selection():
    selection = SelectionTracker([1, 2])

    selection.clear()

    assert selection.selected() == set()
    assert len(selection) == 0


def test_selection_survives_filtering_and_paging(make_category):
    categories = [make_category(i, f"Item {i}") for i in range(1, 8)]
    selection = SelectionTracker()
    selection.toggle(5)

    filtered = query_categories(categories, ListState(search_term="Item 1"))
    paged = query_categories(categories, ListState(page=2, page_size=2))

    assert 5 not in [c.id for c in filtered.items]
    assert 5 not in [c.id for c in paged.items]
    assert selection.is_selected(5)


def test_selected_returns_a_copy():
    selection = SelectionTracker([1])

    selection.selected().add(2)

    assert selection.selected() == {1}


def test_discard_missing_drops_unknown_ids():
    selection = SelectionTracker([1, 2, 3])

    dropped = selection.discard_missing([1, 3, 4])

    assert dropped == {2}
    assert selection.to_list() == [1, 3]
    assert 2 not in selection


def test_from_iterable_handles_missing_session_value():
    assert SelectionTracker.from_iterable(None).selected() == set()
    assert SelectionTracker.from_iterable([4, 4]).to_list() == [4]
