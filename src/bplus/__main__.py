"""line-command driver, `python -m bplus`.

commands, one per line on standard input:
    i <key> <value>     insert (integers)
    d <key>             remove
    p                   print the tree
    q                   quit
"""

import argparse
import sys

# local imports
from bplus import constant
from bplus.high import BPlusTree
from bplus.log import logger


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='bplus',
        description='play with an in-memory B+ tree from stdin.',
    )
    parser.add_argument(
        '--order',
        type=int,
        default=constant.DEFAULT_ORDER,
        help=f'tree order, at least {constant.MIN_ORDER}',
    )
    return parser.parse_args(argv)


def execute(tree, line, out):
    # run one command line against the tree
    # , return False when the driver should stop.

    parts = line.split()
    if not parts:
        return True

    cmd, args = parts[0], parts[1:]

    try:
        if cmd == 'i' and len(args) == 2:
            key, value = int(args[0]), int(args[1])
            tree.insert(key, value)

        elif cmd == 'd' and len(args) == 1:
            key = int(args[0])
            value, found = tree.remove(key)
            if found:
                print(f'removed {key} with value {value}', file=out)

        elif cmd == 'p' and not args:
            pass

        elif cmd == 'q' and not args:
            return False

        else:
            logger.warning('unknown command: %r', line.strip())
            return True

    except ValueError:
        logger.warning('bad number in command: %r', line.strip())
        return True

    print(tree.dump(), file=out)
    return True


def main(argv=None, stdin=None, out=None):
    stdin = stdin or sys.stdin
    out = out or sys.stdout

    args = parse_args(argv)
    tree = BPlusTree(order=args.order)

    for line in stdin:
        if not execute(tree, line, out):
            break

    return tree


if __name__ == '__main__':
    main()
