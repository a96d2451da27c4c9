"""Tests for kanban grouping of parents and subtasks."""

from todopro.core.grouping import column_total, group_by_status, next_order_index


def _all_ids(groups):
    ids = []
    for column in groups.values():
        for group in column:
            ids.append(group.parent.id)
            ids.extend(child.id for child in group.children)
    return ids


def test_every_column_present_even_when_empty():
    groups = group_by_status([])
    assert list(groups) == ["pending", "in_progress", "completed"]
    assert all(column == [] for column in groups.values())


def test_children_sorted_by_order_index(make_task):
    """order_index 2, 0, 1 comes back as 0, 1, 2."""
    parent = make_task(id="P")
    c2 = make_task(id="c2", parent_id="P", order_index=2)
    c0 = make_task(id="c0", parent_id="P", order_index=0)
    c1 = make_task(id="c1", parent_id="P", order_index=1)

    groups = group_by_status([c2, parent, c0, c1])
    (group,) = groups["pending"]
    assert group.parent is parent
    assert [c.id for c in group.children] == ["c0", "c1", "c2"]
    assert group.size == 4


def test_children_follow_parent_column(make_task):
    """A completed subtask stays under its in-progress parent."""
    parent = make_task(id="P", status="in_progress")
    child = make_task(id="C", parent_id="P", status="completed")

    groups = group_by_status([parent, child])
    assert groups["completed"] == []
    assert groups["in_progress"][0].children == [child]


def test_orphan_is_promoted_once(make_task):
    orphan = make_task(id="O", parent_id="X", status="completed")
    parent = make_task(id="P")

    groups = group_by_status([orphan, parent])
    completed = groups["completed"]
    assert len(completed) == 1
    assert completed[0].parent.id == "O"
    assert completed[0].parent.parent_id is None
    assert completed[0].children == []
    assert _all_ids(groups).count("O") == 1
    # The stored task keeps its parent_id; only the display copy is cleared
    assert orphan.parent_id == "X"


def test_unknown_status_lands_in_pending(make_task):
    """A status the board has no column for still gets exactly one card."""
    archived = make_task(id="A", status="archived")
    blocked_orphan = make_task(id="B", parent_id="X", status="blocked")
    unset = make_task(id="U", status="")

    groups = group_by_status([archived, blocked_orphan, unset])
    assert [g.parent.id for g in groups["pending"]] == ["A", "U", "B"]
    assert sorted(_all_ids(groups)) == ["A", "B", "U"]


def test_child_of_a_subtask_is_promoted(make_task):
    parent = make_task(id="P")
    child = make_task(id="C", parent_id="P")
    grandchild = make_task(id="G", parent_id="C")

    groups = group_by_status([parent, child, grandchild])
    assert sorted(_all_ids(groups)) == ["C", "G", "P"]
    promoted = groups["pending"][-1]
    assert promoted.parent.id == "G"
    assert promoted.parent.parent_id is None


def test_expanded_is_passed_in(make_task):
    parent = make_task(id="P")
    other = make_task(id="Q")
    groups = group_by_status([parent, other], expanded={"P"})
    flags = {g.parent.id: g.expanded for g in groups["pending"]}
    assert flags == {"P": True, "Q": False}


def test_invalid_records_skipped(make_task):
    good = make_task(id="1")
    no_title = make_task(id="2", title="")
    groups = group_by_status([good, no_title])
    assert _all_ids(groups) == ["1"]


def test_next_order_index(make_task):
    tasks = [
        make_task(id="P"),
        make_task(id="a", parent_id="P", order_index=0),
        make_task(id="b", parent_id="P", order_index=4),
        make_task(id="c", parent_id="Q", order_index=9),
    ]
    assert next_order_index(tasks, "P") == 5
    assert next_order_index(tasks, "Z") == 1


def test_column_total_counts_subtasks(make_task):
    tasks = [
        make_task(id="P"),
        make_task(id="a", parent_id="P"),
        make_task(id="b", parent_id="P"),
        make_task(id="R"),
    ]
    groups = group_by_status(tasks)
    assert column_total(groups["pending"]) == 4
