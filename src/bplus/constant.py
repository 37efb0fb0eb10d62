# trade-off. bigger order brings shallower trees
# , but every node operation (insert_at, remove_at
# and friends) moves more items around.
# note, order is the maximum fan-out of an internal node.
DEFAULT_ORDER = 4

# anything below this degenerates, a split would
# leave an internal node with no key at all.
MIN_ORDER = 3

# used when the tree is dumped
INDENT_TEMPLATE = '  '
