"""Tests for deep merge helpers."""

from __future__ import annotations

from object_configure.config.merge import copy_tree, deep_merge, set_path


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_nested_mappings_merge_key_by_key(self) -> None:
        """Nested keys from both sides survive."""
        base = {"logger": {"level": "info", "file": "/tmp/a.log"}, "timeout": 5}
        override = {"logger": {"level": "debug"}}

        merged = deep_merge(base, override)

        assert merged == {"logger": {"level": "debug", "file": "/tmp/a.log"}, "timeout": 5}

    def test_lists_and_scalars_are_replaced(self) -> None:
        """Lists are not concatenated."""
        merged = deep_merge({"tags": ["a", "b"], "n": 1}, {"tags": ["c"], "n": 2})
        assert merged == {"tags": ["c"], "n": 2}

    def test_mapping_replaces_scalar(self) -> None:
        """A mapping over a scalar replaces it."""
        assert deep_merge({"logger": "NULL"}, {"logger": {"level": "info"}}) == {
            "logger": {"level": "info"}
        }

    def test_inputs_are_not_modified(self) -> None:
        """Neither argument changes."""
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}

        deep_merge(base, override)

        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}

    def test_leaf_objects_are_shared(self) -> None:
        """Live objects are carried by reference."""
        marker = object()
        merged = deep_merge({"obj": marker}, {})
        assert merged["obj"] is marker

    def test_nested_list_is_shared(self) -> None:
        """A list inside a nested mapping is carried by reference."""
        entries: list = []
        merged = deep_merge({"logger": {"array": entries}}, {"logger": {"level": "info"}})
        assert merged["logger"]["array"] is entries


class TestHelpers:
    """Tests for copy_tree and set_path."""

    def test_copy_tree_copies_mappings_only(self) -> None:
        """Dicts are new objects, lists are shared."""
        items = [1, 2]
        tree = {"logger": {"array": items}}
        copied = copy_tree(tree)
        assert copied == tree
        assert copied is not tree
        assert copied["logger"] is not tree["logger"]
        assert copied["logger"]["array"] is items

    def test_set_path_creates_mappings(self) -> None:
        """Intermediate mappings are created, scalars replaced."""
        target = {"logger": "NULL"}
        set_path(target, ["logger", "file"], "/tmp/x.log")
        set_path(target, ["timeout"], "3")
        assert target == {"logger": {"file": "/tmp/x.log"}, "timeout": "3"}
