"""high-level api."""

# note, if you want some educational comment
# , go and see low.py

import collections
import operator

# local imports
from bplus import constant
from bplus import error
from bplus import low
from bplus import util
from bplus.log import logger


class BPlusTree:
    # most-high-level api, which wraps the root BNode.

    # the tree owns its root and, through it, every node.
    # no locking here, one caller at a time.

    def __init__(self, order=constant.DEFAULT_ORDER, less=operator.lt):
        # note, bool is an int too, but nobody means True by order.
        if (
            type(order) is not int
            or order < constant.MIN_ORDER
        ):
            raise error.InvalidOrder(
                f'order must be an int >= {constant.MIN_ORDER}, got {order!r}',
            )

        self.order = order
        self.less = less

        # will be a BNode after the first insert
        # , None means the tree is empty.
        self.root = None

        # number of key-value pairs
        self.size = 0

        logger.info('new tree, order %d', self.order)

    # public method as follows

    def insert(self, key, value):
        # insert the key-value pair, overwrite the value if
        # the key is already there.
        # return whether the key existed before.

        if self.root is None:
            self.root = low.BNode(self.order, is_leaf=True)

        new_root, existed = self.root.insert(key, value, self.less)
        if new_root is not None:
            self.root = new_root

        if not existed:
            self.size += 1

        return existed

    def remove(self, key):
        # remove the key-value pair by key
        # , then return (value, found).
        # an absent key is not an error, found is just False.

        if self.root is None:
            return None, False

        node, value, found = self.root.remove(key, self.less)
        if not found:
            return None, False

        self.size -= 1

        # walk up from where rebalancing stopped
        # , the root may have collapsed one level.
        while node.parent is not None:
            node = node.parent

        if node.is_leaf and len(node.keys) == 0:
            logger.debug('tree is empty now')
            node = None

        self.root = node

        return value, True

    def search(self, key):
        # if key found, return the value
        # , otherwise, bplus.error.KeyNotFound will be raised.

        if self.root is not None:
            leaf, idx = self.root.search(key, self.less)
            if idx is not None:
                return leaf.values[idx]

        raise error.KeyNotFound(key)

    def get(self, key, default=None):
        try:
            return self.search(key)
        except error.KeyNotFound:
            return default

    def items(self, reversed=False):
        # items method acts just like dict.items do
        # , but lazily and always in key order.

        # technical details:
        # find the leftmost (or rightmost) leaf, then keep following
        # the leaf chain, internal nodes are never visited again.

        if self.root is None:
            return

        if reversed:
            leaf = self.root.rightmost()
            while leaf is not None:
                for idx in range(len(leaf.keys) - 1, -1, -1):
                    yield leaf.keys[idx], leaf.values[idx]
                leaf = leaf.prev
        else:
            leaf = self.root.leftmost()
            while leaf is not None:
                yield from zip(leaf.keys, leaf.values)
                leaf = leaf.next

    def iterate(self):
        return self.items()

    def keys(self, reversed=False):
        for key, _ in self.items(reversed):
            yield key

    def values(self, reversed=False):
        for _, value in self.items(reversed):
            yield value

    def range(self, key_start=None, key_stop=None):
        # do a range query, yield key-value pair stream
        # , key_start <= key < key_stop.

        # note, key_stop will not be included in the stream.
        # either bound can be None, meaning unbounded.

        if self.root is None:
            return

        if key_start is None:
            leaf, idx = self.root.leftmost(), 0
        else:
            leaf = self.root.find_leaf(key_start, self.less)
            idx, _ = leaf.keys.locate(key_start, self.less)

        while leaf is not None:
            for i in range(idx, len(leaf.keys)):
                key = leaf.keys[i]
                if (
                    key_stop is not None
                    and not self.less(key, key_stop)
                ):
                    return
                yield key, leaf.values[i]
            leaf, idx = leaf.next, 0

    def height(self):
        level = 0
        node = self.root
        while node is not None:
            level += 1
            node = node.children[0] if not node.is_leaf else None
        return level

    def dump(self):
        # deterministic level-order rendering
        # , one line per level.

        if self.root is None:
            return '<empty>'

        lines = []
        queue = collections.deque([(self.root, 0)])
        level_nodes = []
        current = 0

        while queue:
            node, level = queue.popleft()
            if level != current:
                lines.append(self._dump_level(current, level_nodes))
                level_nodes = []
                current = level
            level_nodes.append(node)
            for child in node.children:
                queue.append((child, level + 1))

        lines.append(self._dump_level(current, level_nodes))
        return '\n'.join(lines)

    def validate(self):
        # raise bplus.error.InvariantViolation if anything is off
        # , used by tests after every operation.

        if self.root is None:
            if self.size != 0:
                raise error.InvariantViolation(
                    f'empty tree with size {self.size}',
                )
            return

        if self.root.parent is not None:
            raise error.InvariantViolation('root has a parent')

        leaves = self.root.validate(self.less)

        # the leaf chain must match the tree shape, both ways.
        if leaves[0].prev is not None or leaves[-1].next is not None:
            raise error.InvariantViolation('leaf chain has loose ends')
        for left, right in zip(leaves, leaves[1:]):
            if left.next is not right or right.prev is not left:
                raise error.InvariantViolation(
                    f'leaf chain broken between {left!r} and {right!r}',
                )
            if not self.less(left.keys[-1], right.keys[0]):
                raise error.InvariantViolation(
                    f'leaf chain out of order at {right!r}',
                )

        count = sum(len(leaf.keys) for leaf in leaves)
        if count != self.size:
            raise error.InvariantViolation(
                f'{count} pairs in leaves, size says {self.size}',
            )

    # private method as follows

    def _dump_level(self, level, nodes):
        return (
            util.make_indent(level)
            + f'level {level}: '
            + ' '.join(util.render_node(node) for node in nodes)
        )

    # python protocol as follows

    def __len__(self):
        return self.size

    def __contains__(self, key):
        if self.root is None:
            return False
        _, idx = self.root.search(key, self.less)
        return idx is not None

    def __getitem__(self, key):
        return self.search(key)

    def __setitem__(self, key, value):
        self.insert(key, value)

    def __delitem__(self, key):
        _, found = self.remove(key)
        if not found:
            raise error.KeyNotFound(key)

    def __iter__(self):
        return self.keys()

    def __str__(self):
        return self.dump()
