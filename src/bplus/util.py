import math

# local imports
import bplus.constant


def degree(order):
    # minimum fan-out of a non-root internal node
    return math.ceil(order / 2)


def make_indent(level):
    return bplus.constant.INDENT_TEMPLATE * level


def render_node(node):
    # one node in `[k1 k2]` form, leaves show `k:v` pairs
    if node.is_leaf:
        parts = [
            f'{key}:{value}'
            for key, value in zip(node.keys, node.values)
        ]
    else:
        parts = [f'{key}' for key in node.keys]
    return '[' + ' '.join(parts) + ']'
