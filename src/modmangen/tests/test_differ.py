from __future__ import annotations

import os
from pathlib import Path

import pytest

from modmangen.core.common import DEFAULT_IGNORE, FilesystemError, IgnoreSet, InvariantViolation, RelPath, UniqueSet
from modmangen.core.differ import TreeDiffer, diff_trees, find_unique_directories, find_unique_files
from modmangen.core.utils import make_tree
from modmangen.tests.common import magento_install, strs


def test_unique_directories_simple(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'foo/bar/', 'foo/baz/')
    b = make_tree(tmp_path / 'b', 'foo/bar/', 'foo/qux/')
    assert strs(find_unique_directories(a, b)) == ['/foo/baz']


def test_unique_files_simple(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'bar/fileone', 'bar/filetwo', 'foo/filethree')
    assert strs(find_unique_files(a, [RelPath('/bar')])) == ['/foo/filethree']


def test_unique_files_prefix_is_segment_aware(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'foo/x', 'foobar.txt', 'foo-bar/y')
    assert strs(find_unique_files(a, [RelPath('/foo')])) == ['/foo-bar/y', '/foobar.txt']


def test_no_descend_into_unique(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'x/y/z/', 'x/y/w/file')
    b = make_tree(tmp_path / 'b', 'other/')
    # x is unique, so nothing below it is reported separately
    assert strs(find_unique_directories(a, b)) == ['/x']
    assert strs(find_unique_files(a, [RelPath('/x')])) == []


def test_file_in_target_is_not_a_directory(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'thing/inner.txt')
    b = make_tree(tmp_path / 'b', 'thing')  # file, not a directory
    assert strs(find_unique_directories(a, b)) == ['/thing']


def test_magento(tmp_path: Path) -> None:
    inst = magento_install(tmp_path)
    res = diff_trees(inst.module, inst.target)
    assert strs(res.directories) == [
        '/app/code/community/Foo',
        '/app/design/frontend/base/default/template/foo',
        '/js/foo',
        '/lib/Bar',
        '/lib/Foo',
        '/shell',
    ]
    # ignored files/dirs (.git, .gitignore, README.md, modman) aren't there
    assert strs(res.files) == [
        '/app/design/frontend/base/default/layout/foo_bar.xml',
        '/app/etc/modules/Foo_Bar.xml',
        '/js/scriptaculous/foo_effects.js',
        '/skin/frontend/base/default/css/foo_bar.css',
    ]


def test_properties(tmp_path: Path) -> None:
    inst = magento_install(tmp_path)
    differ = TreeDiffer()
    dirs = differ.find_unique_directories(inst.module, inst.target)
    for d in dirs:
        assert not (inst.target / d.text[1:]).is_dir(), d
        assert not any(d.is_under(o) for o in dirs), d

    files = differ.find_unique_files(inst.module, exclude_dirs=dirs)
    for f in files:
        assert not any(f.is_under(d) for d in dirs), f


def test_custom_ignore(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', '.git/HEAD', 'node_modules/x/index.js', 'composer.json', 'src/x.php')
    b = make_tree(tmp_path / 'b', 'src/')

    assert strs(diff_trees(a, b).paths()) == ['/node_modules', '/composer.json', '/src/x.php']

    ignore = IgnoreSet(
        files=DEFAULT_IGNORE.files | {RelPath('/composer.json')},
        dirs=DEFAULT_IGNORE.dirs | {RelPath('/node_modules')},
    )
    assert strs(TreeDiffer(ignore=ignore).diff(a, b).paths()) == ['/src/x.php']


def test_missing_roots(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'x/')
    with pytest.raises(FilesystemError, match="doesn't exist"):
        find_unique_directories(a, tmp_path / 'nope')
    with pytest.raises(FilesystemError, match="doesn't exist"):
        find_unique_directories(tmp_path / 'nope', a)
    f = make_tree(tmp_path / 'c', 'f') / 'f'
    with pytest.raises(FilesystemError, match='not a directory'):
        find_unique_files(f, [])


@pytest.mark.skipif(os.name != 'posix' or (hasattr(os, 'geteuid') and os.geteuid() == 0), reason='needs unix permissions')
def test_unreadable(tmp_path: Path) -> None:
    a = make_tree(tmp_path / 'a', 'locked/secret')
    b = make_tree(tmp_path / 'b', 'locked/')
    locked = a / 'locked'
    locked.chmod(0o000)
    try:
        with pytest.raises(FilesystemError, match="couldn't list"):
            diff_trees(a, b)
    finally:
        locked.chmod(0o755)


def test_unique_set_invariant() -> None:
    with pytest.raises(InvariantViolation):
        UniqueSet(directories=[RelPath('/foo')], files=[RelPath('/foo/bar.txt')])
    # just a prefix, not a parent
    UniqueSet(directories=[RelPath('/foo')], files=[RelPath('/foobar.txt')])


@pytest.mark.skipif(os.name != 'posix', reason='symlinks')
def test_symlinked_directory(tmp_path: Path) -> None:
    elsewhere = make_tree(tmp_path / 'elsewhere', 'lib.php')
    a = make_tree(tmp_path / 'a', 'x/')
    (a / 'vendor').symlink_to(elsewhere)
    b = make_tree(tmp_path / 'b', 'x/')
    assert strs(diff_trees(a, b).paths()) == ['/vendor']

    # exists in the target: the link itself isn't followed
    (b / 'vendor').mkdir()
    assert strs(diff_trees(a, b).paths()) == []
