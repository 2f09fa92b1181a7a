"""
Tests for the Value Tree

These tests verify the nested value storage:
- set(): branch creation, leaf shadowing, sub-tree replacement
- resolve(): path walking
- remove(): excising nodes
- materialize(): plain dict copies of branches

Run with: python -m pytest tests/test_tree.py -v
"""

from treecache.cache.tree import Branch, ValueTree


class TestValueTreeSet:
    """Test set() and resolve()."""

    def test_set_and_resolve(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        assert tree.resolve(["a", "b"]) == (True, 1)

    def test_intermediate_is_branch(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        found, node = tree.resolve(["a"])
        assert found is True
        assert isinstance(node, Branch)

    def test_resolve_missing(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        assert tree.resolve(["a", "c"]) == (False, None)
        assert tree.resolve(["z"]) == (False, None)

    def test_resolve_through_leaf_is_missing(self, tree: ValueTree):
        tree.set(["a"], "scalar")
        assert tree.resolve(["a", "b"]) == (False, None)

    def test_leaf_shadowed_by_deeper_key(self, tree: ValueTree):
        """Test a deeper set turns an intermediate leaf into a branch."""
        tree.set(["a", "b"], "scalar")
        result = tree.set(["a", "b", "c"], 1)

        assert result.shadowed == ["a:b"]
        assert result.replaced_branch is False
        assert tree.resolve(["a", "b", "c"]) == (True, 1)

    def test_replacing_branch_with_leaf(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        result = tree.set(["a"], 2)

        assert result.replaced_branch is True
        assert tree.resolve(["a"]) == (True, 2)
        assert tree.resolve(["a", "b"]) == (False, None)

    def test_stored_dict_is_opaque_leaf(self, tree: ValueTree):
        """Test a caller's dict value is not walked into."""
        tree.set(["a"], {"b": 1})
        assert tree.resolve(["a", "b"]) == (False, None)
        assert tree.paths() == ["a"]


class TestValueTreeRemove:
    """Test remove()."""

    def test_remove_leaf(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        assert tree.remove(["a", "b"]) is True
        assert tree.paths() == ["a"]

    def test_remove_branch(self, tree: ValueTree):
        tree.set(["a", "b", "c"], 1)
        assert tree.remove(["a", "b"]) is True
        assert tree.paths() == ["a"]

    def test_remove_with_missing_ancestor(self, tree: ValueTree):
        tree.set(["a"], 1)
        assert tree.remove(["x", "y"]) is False
        assert tree.remove(["a", "y"]) is False
        assert tree.paths() == ["a"]

    def test_remove_stored_none(self, tree: ValueTree):
        tree.set(["a"], None)
        assert tree.remove(["a"]) is True
        assert tree.is_empty() is True


class TestValueTreeMaterialize:
    """Test materialize(), snapshot(), paths() and leaf_count()."""

    def test_materialize_returns_plain_dicts(self, tree: ValueTree):
        tree.set(["a", "b", "c"], 1)
        tree.set(["a", "d"], 2)

        _, node = tree.resolve(["a"])
        copied = ValueTree.materialize(node)

        assert copied == {"b": {"c": 1}, "d": 2}
        assert type(copied) is dict
        assert type(copied["b"]) is dict

    def test_materialize_does_not_alias(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        _, node = tree.resolve(["a"])

        copied = ValueTree.materialize(node)
        copied["b"] = 99
        copied["new"] = 1

        assert tree.resolve(["a", "b"]) == (True, 1)
        assert tree.resolve(["a", "new"]) == (False, None)

    def test_materialize_leaf_passthrough(self):
        value = [1, 2]
        assert ValueTree.materialize(value) is value

    def test_leaves(self, tree: ValueTree):
        tree.set(["b"], 2)
        tree.set(["a", "x"], 1)
        tree.set(["a", "y", "z"], 3)

        assert tree.leaves() == [("a:x", 1), ("a:y:z", 3), ("b", 2)]

    def test_paths_and_leaf_count(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        tree.set(["a", "c"], 2)
        tree.set(["d"], 3)

        assert tree.paths() == ["a", "a:b", "a:c", "d"]
        assert tree.leaf_count() == 3
        assert tree.snapshot() == {"a": {"b": 1, "c": 2}, "d": 3}

    def test_clear(self, tree: ValueTree):
        tree.set(["a", "b"], 1)
        tree.clear()
        assert tree.is_empty() is True
        assert tree.paths() == []

    def test_deep_path_is_iterative(self, tree: ValueTree):
        """Test paths far deeper than the recursion limit."""
        segments = [f"s{i}" for i in range(5000)]
        tree.set(segments, "deep")

        assert tree.resolve(segments) == (True, "deep")
        assert tree.leaf_count() == 1

        copied = tree.snapshot()
        node = copied
        for part in segments[:-1]:
            node = node[part]
        assert node[segments[-1]] == "deep"

        assert tree.remove(segments[:1]) is True
        assert tree.is_empty() is True
