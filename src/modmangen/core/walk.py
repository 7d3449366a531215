from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path

from .common import DEFAULT_IGNORE, FilesystemError, IgnoreSet, PathKind, RelPath, logger

Entry = tuple[RelPath, PathKind]


def check_tree_root(root: Path) -> Path:
    try:
        is_dir = root.is_dir()
        exists = is_dir or root.exists()
    except OSError as e:
        raise FilesystemError(f"couldn't access {root}: {e}") from e
    if not exists:
        raise FilesystemError(f"{root} doesn't exist")
    if not is_dir:
        raise FilesystemError(f"{root} is not a directory")
    return root


def _classify(entry: os.DirEntry[str]) -> PathKind:
    try:
        # lstat first, so entries which vanished since listing are reported rather than treated as files
        entry.stat(follow_symlinks=False)
        # symlinks are classified by their target, same as test -d
        if entry.is_dir():
            return PathKind.DIRECTORY
        return PathKind.FILE
    except OSError as e:
        raise FilesystemError(f"couldn't classify {entry.path}: {e}") from e


def _list(path: Path) -> list[os.DirEntry[str]]:
    try:
        with os.scandir(path) as it:
            # filesystem order isn't guaranteed to be stable, sorting makes the walk deterministic
            return sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise FilesystemError(f"couldn't list {path}: {e}") from e


def walk_tree(
    root: Path,
    *,
    ignore: IgnoreSet = DEFAULT_IGNORE,
    descend: Callable[[RelPath], bool] | None = None,
) -> Iterator[Entry]:
    '''
    Depth first, pre-order walk over the tree, yields paths relative to the root (root itself isn't yielded)

    Ignored directories are skipped along with their contents.
    descend is called for each yielded directory (after it's been yielded), returning False prunes the subtree.
    Symlinked directories are yielded, but never descended into.
    '''
    root = check_tree_root(Path(root))
    logger.debug('walking %s', root)

    def aux(path: Path, rel: RelPath) -> Iterator[Entry]:
        for e in _list(path):
            erel = rel.child(e.name)
            kind = _classify(e)
            if ignore.ignores(erel, kind):
                logger.debug('ignoring %s', erel)
                continue
            yield erel, kind

            if kind is not PathKind.DIRECTORY:
                continue
            if descend is not None and not descend(erel):
                continue
            if e.is_symlink():
                continue
            yield from aux(Path(e.path), erel)

    yield from aux(root, RelPath(''))


def test_walk_tree(tmp_path: Path) -> None:
    from .utils import make_tree

    make_tree(tmp_path, 'b/y', 'a/x/', '.git/HEAD', 'README.md', 'c/README.md')
    res = [(str(p), k.value) for p, k in walk_tree(tmp_path)]
    assert res == [
        ('/a'          , 'd'),
        ('/a/x'        , 'd'),
        ('/b'          , 'd'),
        ('/b/y'        , 'f'),
        ('/c'          , 'd'),
        ('/c/README.md', 'f'),  # only ignored at the top level
    ]  # fmt: skip

    pruned = [str(p) for p, _ in walk_tree(tmp_path, descend=lambda p: p != RelPath('/a'))]
    assert pruned == ['/a', '/b', '/b/y', '/c', '/c/README.md']
