from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import more_itertools

from .common import DEFAULT_IGNORE, FilesystemError, IgnoreSet, PathKind, RelPath, UniqueSet, logger
from .walk import check_tree_root, walk_tree


def _is_dir(path: Path) -> bool:
    try:
        return path.is_dir()
    except OSError as e:
        raise FilesystemError(f"couldn't access {path}: {e}") from e


class TreeDiffer:
    '''
    Finds what exists in the 'first' (module) tree, but not in the 'second' (target) tree

    Given
      module/           target/
        foo/              foo/
          bar/              bar/
          baz/              qux/

    the unique directories are ['/foo/baz'].
    '''

    def __init__(self, *, ignore: IgnoreSet = DEFAULT_IGNORE) -> None:
        self.ignore = ignore

    def find_unique_directories(self, first: Path, second: Path) -> list[RelPath]:
        '''
        Directories of first that don't exist as directories under second, in traversal order

        Never descends into a unique directory, so the results never nest.
        '''
        first = Path(first)
        second = check_tree_root(Path(second))

        res: list[RelPath] = []

        def descend(rel: RelPath) -> bool:
            # relative paths always start with a separator
            if _is_dir(second / rel.text[1:]):
                return True
            logger.debug('unique directory: %s', rel)
            res.append(rel)
            return False

        # descend() does the actual work, it's only called for directories
        more_itertools.consume(walk_tree(first, ignore=self.ignore, descend=descend))
        return res

    def find_unique_files(self, first: Path, exclude_dirs: Sequence[RelPath]) -> list[RelPath]:
        '''
        All files of first, except the ones covered by exclude_dirs

        exclude_dirs should be the result of find_unique_directories.
        Note that files aren't checked against the target: each one needs a mapping anyway.
        '''
        excluded = frozenset(exclude_dirs)

        def descend(rel: RelPath) -> bool:
            return rel not in excluded

        res: list[RelPath] = []
        for rel, kind in walk_tree(Path(first), ignore=self.ignore, descend=descend):
            if kind is not PathKind.FILE:
                continue
            if any(rel.is_under(d) for d in excluded):
                # pruned directories are never descended into, so just in case
                continue
            res.append(rel)
        return res

    def diff(self, first: Path, second: Path) -> UniqueSet:
        directories = self.find_unique_directories(first, second)
        files = self.find_unique_files(first, exclude_dirs=directories)
        logger.info('%s: %d unique directories, %d files', first, len(directories), len(files))
        return UniqueSet(directories=directories, files=files)


def find_unique_directories(first: Path, second: Path, *, ignore: IgnoreSet = DEFAULT_IGNORE) -> list[RelPath]:
    return TreeDiffer(ignore=ignore).find_unique_directories(first, second)


def find_unique_files(first: Path, exclude: Sequence[RelPath], *, ignore: IgnoreSet = DEFAULT_IGNORE) -> list[RelPath]:
    return TreeDiffer(ignore=ignore).find_unique_files(first, exclude_dirs=exclude)


def diff_trees(first: Path, second: Path, *, ignore: IgnoreSet = DEFAULT_IGNORE) -> UniqueSet:
    return TreeDiffer(ignore=ignore).diff(first, second)
