# bplustree-arena

An in-memory B+ tree map for Python. Keys are kept in sorted nodes, values
live only in the leaves, and the leaves are linked left to right so that
ordered range scans are cheap. When a node overflows or underflows, the tree
first spreads keys across neighbouring siblings under the same parent, and
only then adds or drops a node.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from bplustree_arena.tree import BPlusTree

# b is the branching parameter: a non-root node holds between
# b - 1 and 2 * b - 1 keys. b must be at least 2, otherwise ValueError.
tree = BPlusTree(3)

for i in range(1, 101):
    tree.insert(i, f"value {i}")   # returns None for a new key

tree.insert(10, "ten")             # returns the previous value, "value 10"
tree.get(10)                       # "ten"
tree.get(1000)                     # None

tree.get_in_range(5, 9)            # values for keys 5..9 inclusive, in key order

tree.remove(10)                    # returns "ten"
tree.remove(10)                    # None, the key is gone
```

Any mutually comparable keys work, for example integers, strings or tuples.

`get`, `insert` and `remove` use `None` to mean "no such key", so a stored
value of `None` cannot be told apart from a missing key.

`get_in_range(start, end)` begins its scan at `start` only when `start` is
itself a key in the tree. If it is not, the result is an empty list.

### Looking at the structure

- `tree.node_count()` gives the number of nodes the tree currently holds.
- `tree.levels()` lists the keys of every node, level by level from the root;
  it is an empty list for an empty tree.
- `tree.render()` returns a text picture of the tree, one line per level
  (`L1:`, `L2:`, ...) between two separator lines.
- `tree.print(file)` writes that picture to a stream, standard output when
  `file` is omitted.

```python
tree.print()
```

The node type itself is `bplustree_arena.node.Node`, with `search` (binary)
and `search_linear` returning a `SearchResult` whose `found` and `index`
fields say whether the key is present and where it is or would go.

## What it does not do

- It keeps everything in memory; there is no saving to or loading from disk.
- It is a library only and has no command-line program.
- It has no mapping protocol: no `len()`, `in`, iteration or `[]` indexing.
  Use `get`, `insert`, `remove` and `get_in_range` instead.