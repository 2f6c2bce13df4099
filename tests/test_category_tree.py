from catalog_admin.utils.category_tree import (
    build_category_tree,
    collect_subtree_ids,
    filter_category_tree,
    flatten_category_tree,
    format_category_tree,
)


def _walk(nodes, parent=None):
    for node in nodes:
        yield node, parent
        yield from _walk(node["children"], node)


def test_single_child_scenario(make_category):
    categories = [make_category(1, "Electronics"), make_category(2, "Phones", 1)]

    roots = build_category_tree(categories)

    assert len(roots) == 1
    root = roots[0]
    assert root["category"].name == "Electronics"
    assert root["level"] == 0
    assert root["has_children"] is True
    assert [child["category"].name for child in root["children"]] == ["Phones"]
    assert root["children"][0]["level"] == 1
    assert root["children"][0]["has_children"] is False


def test_flatten_is_depth_first_preorder(make_category):
    categories = [
        make_category(1, "A"),
        make_category(2, "B"),
        make_category(3, "C", 1),
        make_category(4, "D", 1),
        make_category(5, "E", 3),
    ]

    rows = flatten_category_tree(build_category_tree(categories))

    assert [row["category"].name for row in rows] == ["A", "C", "E", "D", "B"]
    assert [row["level"] for row in rows] == [0, 1, 2, 1, 0]


def test_children_listed_before_parents_keep_consistent_levels(make_category):
    categories = [
        make_category(5, "E", 3),
        make_category(3, "C", 1),
        make_category(1, "A"),
        make_category(4, "D", 1),
        make_category(2, "B"),
    ]

    roots = build_category_tree(categories)
    rows = flatten_category_tree(roots)

    assert sorted(row["category"].id for row in rows) == [1, 2, 3, 4, 5]
    for node, parent in _walk(roots):
        expected = 0 if parent is None else parent["level"] + 1
        assert node["level"] == expected
        assert node["has_children"] == (len(node["children"]) > 0)


def test_siblings_preserve_input_order(make_category):
    categories = [
        make_category(1, "Root"),
        make_category(2, "Zeta", 1),
        make_category(3, "Alpha", 1),
        make_category(4, "Mid", 1),
    ]

    root = build_category_tree(categories)[0]

    assert [child["category"].name for child in root["children"]] == ["Zeta", "Alpha", "Mid"]


def test_dangling_parent_is_promoted_to_root(make_category):
    categories = [make_category(1, "Root"), make_category(2, "Orphan", 99)]

    roots = build_category_tree(categories)

    assert [root["category"].name for root in roots] == ["Root", "Orphan"]
    assert roots[1]["level"] == 0


def test_self_parent_is_promoted_to_root(make_category):
    roots = build_category_tree([make_category(1, "Loop", 1)])

    assert len(roots) == 1
    assert roots[0]["children"] == []
    assert roots[0]["has_children"] is False


def test_cycle_is_broken_without_losing_nodes(make_category):
    categories = [
        make_category(1, "A", 2),
        make_category(2, "B", 1),
        make_category(3, "C", 2),
    ]

    roots = build_category_tree(categories)
    rows = flatten_category_tree(roots)

    assert sorted(row["category"].id for row in rows) == [1, 2, 3]
    assert [root["category"].id for root in roots] == [2]
    for node, parent in _walk(roots):
        expected = 0 if parent is None else parent["level"] + 1
        assert node["level"] == expected


def test_empty_input_builds_empty_forest():
    assert build_category_tree([]) == []
    assert flatten_category_tree([]) == []


def test_flatten_is_repeatable(sample_categories):
    roots = build_category_tree(sample_categories)

    first = [row["category"].id for row in flatten_category_tree(roots)]
    second = [row["category"].id for row in flatten_category_tree(roots)]

    assert first == second == [1, 2, 3, 4, 5, 6]


def test_collect_subtree_ids(sample_categories):
    roots = build_category_tree(sample_categories)

    assert collect_subtree_ids(roots, 1) == {1, 2, 3}
    assert collect_subtree_ids(roots, 5) == {5}
    assert collect_subtree_ids(roots, 404) == {404}


def test_filter_category_tree_drops_subtree(sample_categories):
    roots = build_category_tree(sample_categories)

    filtered = filter_category_tree(roots, {1})

    names = [row["category"].name for row in flatten_category_tree(filtered)]
    assert names == ["Home & Garden", "Garden Tools", "Archived"]
    assert filtered[0]["has_children"] is True
    assert filtered[0]["children"][0]["category"].id == 5


def test_format_category_tree_indents_by_level(sample_categories):
    lines = format_category_tree(build_category_tree(sample_categories))

    assert lines[:3] == ["Electronics", "  Phones", "  Laptops"]
    assert lines[-1] == "Archived"
