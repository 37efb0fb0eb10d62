"bplus.error brings custom exceptions."


class KeyNotFound(KeyError):
    # search (or tree[key]) will raise this
    # , remove just reports found=False instead.
    pass


class InvalidOrder(ValueError):
    # raised when constructing a tree
    # with an order smaller than constant.MIN_ORDER
    pass


class InvariantViolation(RuntimeError):
    # never raised for bad input.
    # if you see this one, the rebalancing
    # logic itself is broken.
    pass
