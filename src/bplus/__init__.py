"""bplus, in-memory B+ tree with sorted, linked leaves.
no third party dependency.

insert, remove, point lookup and ordered scans in both directions."""

# note,
# high and low means high-level and low-level api.
# bplus.low has the node and every rebalancing step
# , bplus.high only holds the root.
# we will just use bplus.high.BPlusTree in default.

from bplus.high import BPlusTree
from bplus.low import BNode, Items
