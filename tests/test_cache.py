import pytest

from fsnotice.cache import FileIdCache, FileIdMap, NoCache
from fsnotice.config import RecursiveMode
from fsnotice.file_id import get_file_id


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "top.txt").write_text("a")
    (tmp_path / "sub" / "deep.txt").write_text("b")
    return tmp_path


def test_recursive_root_caches_everything(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.RECURSIVE)
    assert set(cache.paths) == {tree, tree / "sub", tree / "top.txt", tree / "sub" / "deep.txt"}
    assert cache.cached_file_id(tree / "sub" / "deep.txt") == get_file_id(tree / "sub" / "deep.txt")


def test_non_recursive_root_caches_children_only(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.NON_RECURSIVE)
    assert set(cache.paths) == {tree, tree / "sub", tree / "top.txt"}
    assert cache.cached_file_id(tree / "sub" / "deep.txt") is None


def test_remove_root_forgets_subtree(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.RECURSIVE)
    cache.remove_root(tree)
    assert cache.paths == {}
    assert cache.roots == []


def test_remove_path_forgets_children(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.RECURSIVE)
    cache.remove_path(tree / "sub")
    assert set(cache.paths) == {tree, tree / "top.txt"}


def test_add_path_below_recursive_root_walks_deep(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.RECURSIVE)
    (tree / "sub" / "new").mkdir()
    (tree / "sub" / "new" / "n.txt").write_text("c")
    cache.add_path(tree / "sub")
    assert cache.cached_file_id(tree / "sub" / "new" / "n.txt") == get_file_id(
        tree / "sub" / "new" / "n.txt"
    )


def test_rescan_picks_up_new_files(tree):
    cache = FileIdMap()
    cache.add_root(tree, RecursiveMode.RECURSIVE)
    (tree / "later.txt").write_text("d")
    assert cache.cached_file_id(tree / "later.txt") is None
    cache.rescan()
    assert cache.cached_file_id(tree / "later.txt") == get_file_id(tree / "later.txt")


def test_missing_path_is_ignored(tmp_path):
    cache = FileIdMap()
    cache.add_path(tmp_path / "missing")
    assert cache.paths == {}


def test_no_cache_holds_nothing(tree):
    cache = NoCache()
    cache.add_path(tree)
    cache.rescan()
    assert cache.cached_file_id(tree) is None


def test_interface_is_abstract():
    with pytest.raises(TypeError):
        FileIdCache()