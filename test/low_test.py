import operator

import pytest

# local imports
from bplus import error
from bplus.low import BNode, Items


less = operator.lt


@pytest.mark.parametrize(
    'items, search, expected',
    [
        ([1, 2, 3, 4], 2, (1, True)),
        ([1, 2, 4], 3, (2, False)),
        ([2], 2, (0, True)),
        ([2], 3, (1, False)),
        ([2], 1, (0, False)),
        ([], 7, (0, False)),
        ([1, 3, 5, 7, 9], 9, (4, True)),
        ([1, 3, 5, 7, 9], 10, (5, False)),
    ],
)
def test_locate(items, search, expected):
    assert Items(items).locate(search, less) == expected


def test_locate_with_custom_less():
    desc = Items([9, 7, 5, 3])
    assert desc.locate(5, operator.gt) == (2, True)
    assert desc.locate(6, operator.gt) == (2, False)


def test_positional_mutation():
    items = Items([1, 2, 4])
    items.insert_at(2, 3)
    assert items == [1, 2, 3, 4]
    assert items.remove_at(0) == 1
    assert items.take_last() == 4
    assert items == [2, 3]


def test_truncate_does_not_alias():
    items = Items([1, 2, 3, 4, 5])
    tail = items.truncate(2)
    assert items == [1, 2]
    assert tail == [3, 4, 5]
    assert isinstance(tail, Items)

    tail.append(6)
    assert items == [1, 2]


def make_leaf(order, keys):
    leaf = BNode(order, is_leaf=True)
    leaf.keys = Items(keys)
    leaf.values = Items(k * 10 for k in keys)
    return leaf


class TestCapacity:

    @pytest.mark.parametrize(
        'order, leaf_bounds, internal_bounds',
        [
            (3, (2, 3), (1, 2)),
            (4, (2, 4), (1, 3)),
            (5, (3, 5), (2, 4)),
            (8, (4, 8), (3, 7)),
        ],
    )
    def test_bounds(self, order, leaf_bounds, internal_bounds):
        leaf = BNode(order, is_leaf=True)
        internal = BNode(order)
        assert (leaf.min_keys(), leaf.max_keys()) == leaf_bounds
        assert (internal.min_keys(), internal.max_keys()) == internal_bounds

    def test_is_root(self):
        root = BNode(4)
        child = BNode(4, is_leaf=True, parent=root)
        assert root.is_root()
        assert not child.is_root()


class TestSplit:

    def test_leaf_split_copies_promoted_key(self):
        leaf = make_leaf(4, [1, 2, 3, 4, 5])
        key, right = leaf.split(leaf.min_keys())

        assert key == 3
        assert leaf.keys == [1, 2]
        assert leaf.values == [10, 20]
        assert right.keys == [3, 4, 5]
        assert right.values == [30, 40, 50]
        assert right.is_leaf

    def test_leaf_split_links_new_leaf_after_self(self):
        leaf = make_leaf(4, [1, 2, 3, 4, 5])
        after = make_leaf(4, [9, 10])
        leaf.next, after.prev = after, leaf

        _, right = leaf.split(2)

        assert leaf.next is right
        assert right.prev is leaf
        assert right.next is after
        assert after.prev is right

    def test_internal_split_moves_promoted_key_up(self):
        node = BNode(4)
        node.keys = Items([10, 20, 30, 40])
        node.children = Items(
            make_leaf(4, [k]) for k in [5, 15, 25, 35, 45]
        )
        for child in node.children:
            child.parent = node

        key, right = node.split(node.min_keys())

        assert key == 20
        assert node.keys == [10]
        assert right.keys == [30, 40]
        assert [c.keys[0] for c in node.children] == [5, 15]
        assert [c.keys[0] for c in right.children] == [25, 35, 45]
        assert all(c.parent is right for c in right.children)

    def test_root_split_grows_one_level(self):
        root = make_leaf(3, [1, 2, 3])
        new_root, existed = root.insert(4, 40, less)

        assert existed is False
        assert new_root is not None
        assert new_root.keys == [3]
        assert new_root.children[0] is root
        assert root.parent is new_root
        assert new_root.children[1].parent is new_root

    def test_insert_existing_key_overwrites(self):
        root = make_leaf(3, [1, 2, 3])
        new_root, existed = root.insert(2, 'two', less)

        assert new_root is None
        assert existed is True
        assert root.values == [10, 'two', 30]

    def test_promoted_key_collision_is_an_invariant_violation(self):
        parent = BNode(3)
        left = make_leaf(3, [1, 2, 3, 4])
        right = make_leaf(3, [5, 6])
        # a broken separator: it should have been 5
        parent.keys = Items([3])
        parent.children = Items([left, right])
        left.parent = right.parent = parent

        with pytest.raises(error.InvariantViolation):
            left.check_after_insert(less)


class TestRemove:

    def make_two_leaves(self, left_keys, right_keys, order=4):
        parent = BNode(order)
        left = make_leaf(order, left_keys)
        right = make_leaf(order, right_keys)
        parent.keys = Items([right_keys[0]])
        parent.children = Items([left, right])
        left.parent = right.parent = parent
        left.next, right.prev = right, left
        return parent, left, right

    def test_remove_missing_key(self):
        parent, left, right = self.make_two_leaves([1, 2], [3, 4])
        stop, value, found = parent.remove(7, less)

        assert (value, found) == (None, False)
        assert stop is right
        assert right.keys == [3, 4]

    def test_steal_from_previous_leaf(self):
        parent, left, right = self.make_two_leaves([1, 2, 3], [5, 6])
        stop, value, found = parent.remove(6, less)

        assert (value, found) == (60, True)
        assert stop is right
        assert left.keys == [1, 2]
        assert right.keys == [3, 5]
        assert parent.keys == [3]

    def test_steal_from_next_leaf_uses_its_new_first_key(self):
        parent, left, right = self.make_two_leaves([1, 2], [5, 6, 7])
        parent.remove(1, less)

        assert left.keys == [2, 5]
        assert left.values == [20, 50]
        assert right.keys == [6, 7]
        assert parent.keys == [6]

    def test_merge_collapses_root(self):
        parent, left, right = self.make_two_leaves([1, 2], [5, 6])
        stop, value, found = parent.remove(5, less)

        assert found
        assert stop is left
        assert stop.parent is None
        assert left.keys == [1, 2, 6]
        assert left.values == [10, 20, 60]
        assert left.next is None
        assert parent.keys == []

    def test_steal_on_internal_node_is_an_invariant_violation(self):
        parent, left, right = self.make_two_leaves([1, 2], [5, 6])
        with pytest.raises(error.InvariantViolation):
            parent.steal_from_neighbor_leaf()

    def test_orphan_is_an_invariant_violation(self):
        parent, left, right = self.make_two_leaves([1, 2], [5, 6])
        stranger = make_leaf(4, [9])
        stranger.parent = parent
        with pytest.raises(error.InvariantViolation):
            stranger.find_from_which_branch()


def test_validate_catches_broken_child_count():
    parent = BNode(4)
    parent.keys = Items([3])
    leaf = make_leaf(4, [1, 2])
    leaf.parent = parent
    parent.children = Items([leaf])

    with pytest.raises(error.InvariantViolation, match='children count'):
        parent.validate(less)
