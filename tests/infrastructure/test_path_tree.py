from git_introspect.infrastructure.path_tree import build_tree, iter_tree


class TestBuildTree:
    def test_empty_input(self):
        assert build_tree([]) == {}

    def test_single_top_level_file(self):
        assert build_tree(["x"]) == {".": ["x"]}

    def test_shared_prefixes_merge(self):
        tree = build_tree(["a/b/c", "a/b/d", "a/e"])
        assert tree == {"a": {"b": {".": ["c", "d"]}, ".": ["e"]}}

    def test_no_duplicate_sibling_directories(self):
        tree = build_tree(["src/a.py", "docs/x.md", "src/b.py"])
        assert list(tree) == ["src", "docs"]
        assert tree["src"] == {".": ["a.py", "b.py"]}

    def test_top_level_and_nested_files_mixed(self):
        tree = build_tree(["README.md", "src/main.py", "setup.cfg"])
        assert tree == {".": ["README.md", "setup.cfg"], "src": {".": ["main.py"]}}

    def test_source_order_preserved(self):
        tree = build_tree(["z.txt", "a.txt", "m.txt"])
        assert tree["."] == ["z.txt", "a.txt", "m.txt"]

    def test_duplicates_kept(self):
        assert build_tree(["a/x", "a/x"]) == {"a": {".": ["x", "x"]}}

    def test_empty_path(self):
        assert build_tree([""]) == {".": [""]}

    def test_trailing_slash_gives_empty_leaf(self):
        assert build_tree(["dir/"]) == {"dir": {".": [""]}}

    def test_leading_slash_gives_empty_segment(self):
        assert build_tree(["/etc"]) == {"": {".": ["etc"]}}

    def test_dot_segment_stays_at_current_level(self):
        tree = build_tree(["top", "./inner"])
        assert tree == {".": ["top", "inner"]}

    def test_accepts_generator(self):
        tree = build_tree(p for p in ["a/b", "a/c"])
        assert tree == {"a": {".": ["b", "c"]}}

    def test_deep_nesting(self):
        tree = build_tree(["a/b/c/d/e.txt"])
        assert tree["a"]["b"]["c"]["d"]["."] == ["e.txt"]


class TestIterTree:
    def test_every_leaf_reachable(self):
        paths = ["README.md", "src/main.py", "src/lib/util.py", "docs/a.md", "src/b.py"]
        assert sorted(iter_tree(build_tree(paths))) == sorted(paths)

    def test_empty_tree(self):
        assert list(iter_tree({})) == []

    def test_leaves_before_subdirectories(self):
        tree = build_tree(["src/x.py", "top.txt"])
        assert list(iter_tree(tree)) == ["top.txt", "src/x.py"]
