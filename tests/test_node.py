import random

import pytest

from bplustree_arena.node import Node, SearchResult


@pytest.fixture
def sample_node():
    keys = list(range(2, 200, 3))
    return Node(keys=keys, values=[k * 10 for k in keys])


def test_empty_node_goes_down_to_start():
    node = Node()
    assert node.search(5) == SearchResult(False, 0)
    assert node.search_linear(5) == SearchResult(False, 0)


def test_new_node_is_leaf_without_links():
    node = Node()
    assert node.is_leaf() is True
    assert node.left is None and node.right is None
    assert node.keys == [] and node.values == [] and node.children == []


def test_node_with_children_is_not_leaf():
    node = Node(keys=[5], children=[1, 2])
    assert node.is_leaf() is False


def test_search_finds_every_present_key(sample_node):
    for position, key in enumerate(sample_node.keys):
        result = sample_node.search(key)
        assert result.found is True
        assert result.index == position
        assert sample_node.values[result.index] == key * 10


def test_search_absent_key_gives_insertion_point(sample_node):
    for key in range(0, 205):
        if key in sample_node.keys:
            continue
        result = sample_node.search(key)
        assert result.found is False
        assert all(k < key for k in sample_node.keys[: result.index])
        assert all(k > key for k in sample_node.keys[result.index :])


def test_search_past_end_goes_to_last_child(sample_node):
    result = sample_node.search(10_000)
    assert result == SearchResult.go_down(len(sample_node.keys))


def test_linear_and_binary_agree():
    rng = random.Random(1234)
    for _ in range(50):
        keys = sorted(rng.sample(range(500), rng.randint(0, 40)))
        node = Node(keys=keys)
        for key in range(-5, 505, 7):
            assert node.search(key) == node.search_linear(key)


def test_search_result_constructors():
    assert SearchResult.hit(3) == SearchResult(True, 3)
    assert SearchResult.go_down(3) == SearchResult(False, 3)
    assert SearchResult.hit(3) != SearchResult.go_down(3)


def test_copy_is_independent(sample_node):
    sample_node.left = 7
    clone = sample_node.copy()
    assert clone == sample_node
    clone.keys.append(1000)
    clone.values.pop()
    assert clone.keys != sample_node.keys
    assert len(sample_node.values) == len(sample_node.keys)
    assert clone.left == sample_node.left


def test_search_with_string_keys():
    node = Node(keys=["apple", "banana", "cherry"])
    assert node.search("banana") == SearchResult.hit(node.keys.index("banana"))
    missing = node.search("blueberry")
    assert missing.found is False
    assert node.keys[missing.index - 1] < "blueberry" < node.keys[missing.index]