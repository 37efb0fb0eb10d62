"""low-level api, the most core part."""


# local imports
from bplus import error
from bplus import util
from bplus.log import logger


# note, in this source code, when I say `less`, I mean the strict
# less-than function the tree was built with, less(a, b) is True
# if and only if a sorts before b. two keys are equal when neither
# one is less than the other, `==` is never used on keys.

# note, every node is a BNode, there is no separate leaf class.
# the `is_leaf` flag decides which role the node plays:
#
#       internal node:
#           keys      [ k0  k1  ...  kn-1 ]
#           children  [ c0  c1  ...  cn-1  cn ]
#
#       leaf node:
#           keys      [ k0  k1  ...  kn-1 ]
#           values    [ v0  v1  ...  vn-1 ]
#           prev, next  (neighbour leaves)
#
# child c0 holds every key < k0, child ci (i > 0) holds the keys
# in [ki-1, ki), the last child holds every key >= kn-1.
# values only live in leaves, internal keys are just separators
# , so a key can show up in an internal node and in a leaf at the
# same time.


class Items(list):
    # an ordered sequence of keys (or values, or children)

    # it's just a list with the handful of positional operations
    # the node needs, named after what the node does with them.

    def locate(self, item, less):
        # binary search.
        # return (index, found), where index is the matching index
        # if found, otherwise the insertion point.

        lo, hi = 0, len(self)
        while lo < hi:
            mid = (lo + hi) // 2
            if less(item, self[mid]):
                hi = mid
            else:
                lo = mid + 1

        # lo is now the first index whose item is greater than `item`
        # , so the one right before it is either equal or smaller.
        if lo > 0 and not less(self[lo - 1], item):
            return lo - 1, True
        return lo, False

    def insert_at(self, index, item):
        self.insert(index, item)

    def remove_at(self, index):
        return self.pop(index)

    def take_last(self):
        return self.pop()

    def truncate(self, index):
        # keep the first `index` items, the rest
        # is cut off and returned as a new Items.
        tail = Items(self[index:])
        del self[index:]
        return tail


class BNode:
    # the class where all the magic happens in my implementation

    # frequently asked question:
    # Q: where is the tree?
    # A: a BNode can have its own children, so if you consider it
    # overall, the root BNode is the tree. bplus.high.BPlusTree is
    # just the handle holding the root, the order and `less`.
    #
    # Q: why do the public methods return the node where
    # propagation stopped?
    # A: splitting can create a new root one level up, and merging
    # can collapse the root one level down. the node itself can not
    # replace the handle's root reference, so it reports back.

    def __init__(self, order, is_leaf=False, parent=None):
        self.order = order
        self.is_leaf = is_leaf

        # another BNode
        # or None if self is the root.
        # never used to keep nodes alive, only for walking up.
        self.parent = parent

        self.keys = Items()
        # leaf only, parallel to keys
        self.values = Items()
        # internal only, always len(keys) + 1
        self.children = Items()

        # leaf only, the neighbour leaves in key order
        self.prev = None
        self.next = None

    def __repr__(self):
        role = 'leaf' if self.is_leaf else 'internal'
        return f'<BNode {role} {util.render_node(self)}>'

    # capacity as follows

    def max_keys(self):
        if self.is_leaf:
            return self.order
        return self.order - 1

    def min_keys(self):
        # the root is exempt, see check_after_delete
        if self.is_leaf:
            return util.degree(self.order)
        return util.degree(self.order) - 1

    def is_root(self):
        return self.parent is None

    # public method as follows

    def insert(self, key, value, less):
        # insert the key-value pair into the subtree rooted at self.

        # if the key already exists, only its value is overwritten
        # and the tree shape does not change at all.

        # return (new_root, existed), new_root is None unless the
        # old root has been split.

        leaf = self.find_leaf(key, less)

        idx, found = leaf.keys.locate(key, less)
        if found:
            leaf.values[idx] = value
            return None, True

        leaf.keys.insert_at(idx, key)
        leaf.values.insert_at(idx, value)

        return leaf.check_after_insert(less), False

    def remove(self, key, less):
        # remove the key-value pair from the subtree rooted at self.

        # return (stop_node, value, found). stop_node is the node where
        # rebalancing stopped, walk up its parents to get the root.
        # if the key is not there, nothing changes at all.

        leaf = self.find_leaf(key, less)

        idx, found = leaf.keys.locate(key, less)
        if not found:
            return leaf, None, False

        leaf.keys.remove_at(idx)
        value = leaf.values.remove_at(idx)

        return leaf.check_after_delete(), value, True

    def search(self, key, less):
        # return (leaf, idx), idx is None if key is not found.
        leaf = self.find_leaf(key, less)
        idx, found = leaf.keys.locate(key, less)
        if found:
            return leaf, idx
        return leaf, None

    def find_leaf(self, key, less):
        # quickly check whether our goal is reached.
        if self.is_leaf:
            return self

        child = self.children[self.route(key, less)]

        # keep looking till leaf node found (recursively)
        return child.find_leaf(key, less)

    def leftmost(self):
        if self.is_leaf:
            return self
        return self.children[0].leftmost()

    def rightmost(self):
        if self.is_leaf:
            return self
        return self.children[-1].rightmost()

    def validate(self, less, lower=None, upper=None):
        # check every invariant of the subtree rooted at self
        # , then return its leaves from left to right.

        # lower is inclusive, upper is exclusive, both come from
        # the separators of the ancestors (None means unbounded).

        def fail(message):
            raise error.InvariantViolation(f'{self!r}: {message}')

        if self.parent is None:
            if not self.is_leaf and len(self.keys) == 0:
                fail('internal root without keys')
        elif len(self.keys) < self.min_keys():
            fail('too few keys')
        if len(self.keys) > self.max_keys():
            fail('too many keys')

        for a, b in zip(self.keys, self.keys[1:]):
            if not less(a, b):
                fail('keys are not strictly increasing')
        for key in self.keys:
            if lower is not None and less(key, lower):
                fail(f'key {key} below separator {lower}')
            if upper is not None and not less(key, upper):
                fail(f'key {key} not below separator {upper}')

        if self.is_leaf:
            if self.children:
                fail('leaf with children')
            if len(self.values) != len(self.keys):
                fail('values do not match keys')
            return [self]

        if len(self.children) != len(self.keys) + 1:
            fail('children count is not keys + 1')
        if self.values:
            fail('internal node with values')

        leaves = []
        bounds = [lower] + list(self.keys) + [upper]
        for i, child in enumerate(self.children):
            if child.parent is not self:
                fail(f'child {i} does not point back to its parent')
            leaves.extend(
                child.validate(less, bounds[i], bounds[i + 1])
            )
        return leaves

    # private method as follows

    def route(self, key, less):
        # index of the child whose range holds the key.
        # a key equal to a separator goes right, since the range
        # of that child starts at the separator.
        idx, found = self.keys.locate(key, less)
        if found:
            return idx + 1
        return idx

    def find_from_which_branch(self):
        for idx, child in enumerate(self.parent.children):
            if child is self:
                return idx

        raise error.InvariantViolation(
            f'{self!r} is not a child of its parent',
        )

    def neighbors(self, idx):
        # return (left, right) siblings under the same parent
        # , either one can be None.

        # leaves use the leaf chain, but a neighbour leaf under
        # another parent does not count, the separator between
        # them lives higher up in the tree.
        if self.is_leaf:
            left, right = self.prev, self.next
            if left is not None and left.parent is not self.parent:
                left = None
            if right is not None and right.parent is not self.parent:
                right = None
            return left, right

        children = self.parent.children
        left = children[idx - 1] if idx > 0 else None
        right = children[idx + 1] if idx + 1 < len(children) else None
        return left, right

    def check_after_insert(self, less):
        if len(self.keys) <= self.max_keys():
            return None

        return self.split_me(less)

    def check_after_delete(self):
        if self.parent is None:
            # the root has no minimum, it only collapses
            # once an internal root runs out of keys.
            if not self.is_leaf and len(self.keys) == 0:
                return self.collapse_me()
            return self

        if len(self.keys) >= self.min_keys():
            return self

        if self.is_leaf:
            if self.steal_from_neighbor_leaf():
                return self
        elif self.rotate_from_neighbor():
            return self

        return self.merge_me()

    def split(self, idx):
        # split self at idx, self keeps everything before idx
        # , then return (promoted_key, new_right_node).

        # note, for leaves the promoted key is copied, it stays
        # as the first key of the new leaf. for internal nodes it
        # moves up and is kept in neither half.

        promoted_key = self.keys[idx]

        new_node = BNode(
            self.order,
            is_leaf=self.is_leaf,
            parent=self.parent,
        )

        if self.is_leaf:
            new_node.keys = self.keys.truncate(idx)
            new_node.values = self.values.truncate(idx)

            # new leaf sits right after self in the chain
            new_node.prev = self
            new_node.next = self.next
            if self.next is not None:
                self.next.prev = new_node
            self.next = new_node

        else:
            right_keys = self.keys.truncate(idx)
            right_keys.remove_at(0)
            new_node.keys = right_keys

            new_node.children = self.children.truncate(idx + 1)
            for child in new_node.children:
                child.parent = new_node

        return promoted_key, new_node

    def split_me(self, less):
        promoted_key, new_node = self.split(self.min_keys())

        logger.debug(
            'split %r, promoted %r', self, promoted_key,
        )

        parent = self.parent

        if parent is None:
            # self was the root, grow up one level.
            root = BNode(self.order)
            root.keys.append(promoted_key)
            root.children.extend([self, new_node])
            self.parent = root
            new_node.parent = root

            logger.debug('new root %r', root)
            return root

        idx, found = parent.keys.locate(promoted_key, less)
        if found:
            # separators in parent come from keys of other
            # subtrees, they can never equal a key of self.
            raise error.InvariantViolation(
                f'promoted key {promoted_key!r} already in {parent!r}',
            )

        parent.keys.insert_at(idx, promoted_key)
        # self is at idx, so the new right half goes after it
        parent.children.insert_at(idx + 1, new_node)

        return parent.check_after_insert(less)

    def steal_from_neighbor_leaf(self):
        if not self.is_leaf:
            raise error.InvariantViolation(
                f'steal on internal node {self!r}',
            )

        parent = self.parent
        idx = self.find_from_which_branch()
        prev_leaf, next_leaf = self.neighbors(idx)

        if prev_leaf is not None and len(prev_leaf.keys) > prev_leaf.min_keys():
            self.keys.insert_at(0, prev_leaf.keys.take_last())
            self.values.insert_at(0, prev_leaf.values.take_last())

            # the stolen key is the new lower bound of self
            parent.keys[idx - 1] = self.keys[0]

            logger.debug('%r stole from previous leaf', self)
            return True

        if next_leaf is not None and len(next_leaf.keys) > next_leaf.min_keys():
            self.keys.append(next_leaf.keys.remove_at(0))
            self.values.append(next_leaf.values.remove_at(0))

            # next leaf now starts at its new first key
            parent.keys[idx] = next_leaf.keys[0]

            logger.debug('%r stole from next leaf', self)
            return True

        return False

    def rotate_from_neighbor(self):
        # internal version of the steal, a key goes down from
        # parent into self, and the neighbour's edge key goes up
        # into parent, together with one child changing hands.

        parent = self.parent
        idx = self.find_from_which_branch()
        left, right = self.neighbors(idx)

        if left is not None and len(left.keys) > left.min_keys():
            self.keys.insert_at(0, parent.keys[idx - 1])
            parent.keys[idx - 1] = left.keys.take_last()

            child = left.children.take_last()
            child.parent = self
            self.children.insert_at(0, child)

            logger.debug('%r rotated from left sibling', self)
            return True

        if right is not None and len(right.keys) > right.min_keys():
            self.keys.append(parent.keys[idx])
            parent.keys[idx] = right.keys.remove_at(0)

            child = right.children.remove_at(0)
            child.parent = self
            self.children.append(child)

            logger.debug('%r rotated from right sibling', self)
            return True

        return False

    def merge_me(self):
        parent = self.parent
        idx = self.find_from_which_branch()
        left, right = self.neighbors(idx)

        # merge into the left sibling if there is one
        # , otherwise absorb the right sibling.
        if left is not None:
            first, second, separator_idx = left, self, idx - 1
        elif right is not None:
            first, second, separator_idx = self, right, idx
        else:
            raise error.InvariantViolation(
                f'{self!r} has no sibling to merge with',
            )

        separator = parent.keys.remove_at(separator_idx)
        parent.children.remove_at(separator_idx + 1)

        if first.is_leaf:
            first.keys.extend(second.keys)
            first.values.extend(second.values)

            first.next = second.next
            if second.next is not None:
                second.next.prev = first
            second.prev = second.next = None

        else:
            # the separator comes down between the two halves
            first.keys.append(separator)
            first.keys.extend(second.keys)
            for child in second.children:
                child.parent = first
            first.children.extend(second.children)

        second.parent = None

        if len(first.keys) > first.max_keys():
            raise error.InvariantViolation(
                f'merge overflowed {first!r}',
            )

        logger.debug('merged into %r', first)

        # parent lost a key, it may be underfull now too
        return parent.check_after_delete()

    def collapse_me(self):
        # self is an internal root with a single child left
        # , that child becomes the new root.
        child = self.children.take_last()
        child.parent = None

        logger.debug('root collapsed into %r', child)
        return child
