from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Sequence
from functools import cache

import more_itertools

from .common import SEP, InvariantViolation, MappingEntry, RelPath, as_relpaths, logger, parametrize

# first character sorting after the separator, used to find the end of a directory's block
_AFTER_SEP = chr(ord(SEP) + 1)


def _block(texts: Sequence[str], directory: RelPath) -> range:
    '''
    In a sorted list, everything under a directory is contiguous
    '''
    prefix = directory.text + SEP
    lo = bisect_left(texts, prefix)
    hi = bisect_left(texts, directory.text + _AFTER_SEP, lo=lo)
    return range(lo, hi)


def _check_no_nesting(paths: Sequence[RelPath], texts: Sequence[str]) -> None:
    for p in paths:
        if p.is_root:
            raise InvariantViolation("tree root can't be mapped")
        blk = _block(texts, p)
        if len(blk) > 0:
            child = paths[blk[0]]
            raise InvariantViolation(f'{child} is covered by {p}, both are in the compaction input')


def compact(paths: Iterable[str | RelPath]) -> list[MappingEntry]:
    '''
    Collapses sibling paths into 'dir/*' glob entries where it's safe to do so

    >>> [e.line for e in compact(['/app/code/Community/Bar', '/app/code/Community/Foo', '/123.php'])]
    ['/123.php\\t/123.php', '/app/code/Community/*\\t/app/code/Community/']

    A directory is only globbed if it has at least two entries, and none of the other entries
    lives deeper inside it. E.g. for
      /js/custom.js
      /js/main.js
      /js/scriptaculous/custom.js
    '/js/*' would also claim /js/scriptaculous, which exists in the target,
    so instead each path gets its own mapping.
    '''
    # the result only depends on the set of paths, not on the traversal order
    ps = sorted(set(as_relpaths(paths)))
    texts = [p.text for p in ps]
    _check_no_nesting(ps, texts)

    @cache
    def has_nested(directory: RelPath) -> bool:
        # covers the case when the entry right after the run is a subdirectory of it,
        # but also anything deeper/non-adjacent, e.g. /js/a/x.js, /js/b.js, /js/c.js
        nested = [ps[i] for i in _block(texts, directory) if ps[i].parent != directory]
        if len(nested) > 0:
            logger.debug('not globbing %s, it has nested entries: %s', directory, nested[0])
        return len(nested) > 0

    res: list[MappingEntry] = []
    it = more_itertools.peekable(ps)
    for cur in it:
        parent = cur.parent
        if parent.is_root or has_nested(parent):
            res.append(MappingEntry.file(cur))
            continue

        run: list[RelPath] = []
        while it and it.peek().parent == parent:
            run.append(next(it))

        if len(run) == 0:
            # lone entry
            res.append(MappingEntry.file(cur))
        else:
            res.append(MappingEntry.glob(parent))
    return res


def format_entries(entries: Iterable[MappingEntry]) -> list[str]:
    return [e.line for e in entries]


def globify_and_format(paths: Iterable[str | RelPath]) -> list[str]:
    return format_entries(compact(paths))


@parametrize(
    ('paths', 'expected'),
    [
        ([], []),
        (['/123.php'], ['/123.php\t/123.php']),
        (
            ['/app/code/Community/Bar', '/app/code/Community/Baz', '/app/code/Community/Foo'],
            ['/app/code/Community/*\t/app/code/Community/'],
        ),
        (
            ['/js/custom.js', '/js/main.js', '/js/scriptaculous/custom.js'],
            ['/js/custom.js\t/js/custom.js', '/js/main.js\t/js/main.js', '/js/scriptaculous/custom.js\t/js/scriptaculous/custom.js'],
        ),
    ],
)
def test_globify_and_format(paths: list[str], expected: list[str]) -> None:
    assert globify_and_format(paths) == expected
