"""Flat repository paths -> nested directory tree.

- build_tree: fold ``a/b/c`` style paths into nested dicts
- iter_tree: walk a tree back out to ``/``-joined paths
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from git_introspect.domain.models import LEAF_KEY, PathTree


def build_tree(paths: Iterable[str]) -> PathTree:
    """Fold flat ``/``-separated paths into a nested tree.

    Each directory segment becomes a nested dict; the last segment is
    appended to the ``"."`` list of the directory it lives in. Paths that
    share a prefix land in the same sub-tree. Order follows the input and
    nothing is de-duplicated.

    >>> build_tree(["a/b/c", "a/b/d", "a/e"])
    {'a': {'b': {'.': ['c', 'd']}, '.': ['e']}}
    """
    tree: PathTree = {}
    for path in paths:
        *dirs, name = path.split("/")
        cursor = tree
        for segment in dirs:
            # "." is the current directory and must not shadow the leaf list
            if segment == LEAF_KEY:
                continue
            cursor = cursor.setdefault(segment, {})
        cursor.setdefault(LEAF_KEY, []).append(name)
    return tree


def iter_tree(tree: PathTree, prefix: str = "") -> Iterator[str]:
    """Yield every leaf of *tree* as a ``/``-joined path."""
    for name in tree.get(LEAF_KEY, []):
        yield prefix + name
    for key, child in tree.items():
        if key == LEAF_KEY:
            continue
        yield from iter_tree(child, f"{prefix}{key}/")
