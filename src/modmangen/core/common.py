from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING

from .ext.logging import LazyLogger

logger = LazyLogger(__name__, level='info')


SEP = '/'


class ModmanGenError(RuntimeError):
    pass


class FilesystemError(ModmanGenError):
    '''
    Tree is missing/unreadable, or an entry couldn't be classified as a file or a directory
    '''


class InvariantViolation(ModmanGenError):
    '''
    Means the differ produced something the compactor can't safely glob, i.e. a bug upstream
    '''


@total_ordering
@dataclass(frozen=True)
class RelPath:
    '''
    Path relative to the compared tree, e.g. '/app/code/Community/Foo'

    Always starts with a separator and never ends with one, so the string form is a unique key.
    The tree root itself is represented by an empty string.
    Ordering is plain string ordering (code points, same as utf8 bytes), not locale aware.
    '''

    text: str

    def __post_init__(self) -> None:
        t = self.text
        if t == '':
            return
        if not t.startswith(SEP) or t.endswith(SEP) or (SEP + SEP) in t:
            raise ValueError(f'malformed relative path: {t!r}')

    @classmethod
    def of(cls, s: str | RelPath) -> RelPath:
        '''
        Lenient constructor: 'app/code/' -> '/app/code'
        '''
        if isinstance(s, RelPath):
            return s
        s = s.strip(SEP)
        return cls('' if s == '' else SEP + s)

    def __str__(self) -> str:
        return self.text

    def __lt__(self, other: RelPath) -> bool:
        return self.text < other.text

    @property
    def name(self) -> str:
        return self.text.rpartition(SEP)[2]

    @property
    def parent(self) -> RelPath:
        # for root level entries, e.g. '/123.php' -> ''
        return RelPath(self.text.rpartition(SEP)[0])

    @property
    def grandparent(self) -> RelPath:
        return self.parent.parent

    @property
    def is_root(self) -> bool:
        return self.text == ''

    @property
    def is_root_level(self) -> bool:
        return not self.is_root and self.parent.is_root

    def child(self, name: str) -> RelPath:
        return RelPath(self.text + SEP + name)

    def is_under(self, other: RelPath) -> bool:
        '''
        Strict, segment aware: '/foo/x' is under '/foo', '/foobar' isn't
        '''
        return self.text.startswith(other.text + SEP)


class PathKind(Enum):
    DIRECTORY = 'd'
    FILE = 'f'


def _relpaths(*items: str) -> frozenset[RelPath]:
    return frozenset(RelPath.of(i) for i in items)


@dataclass(frozen=True)
class IgnoreSet:
    files: frozenset[RelPath] = field(default_factory=frozenset)
    dirs: frozenset[RelPath] = field(default_factory=frozenset)

    def ignores(self, path: RelPath, kind: PathKind) -> bool:
        if kind is PathKind.DIRECTORY:
            return path in self.dirs
        return path in self.files


# NOTE: matched against the full relative path, so only the ones at the module root are ignored
DEFAULT_IGNORE = IgnoreSet(
    files=_relpaths(
        '.gitignore',
        'Gruntfile.js',
        'modman',
        'package.json',
        'README.md',
        'README',
    ),
    dirs=_relpaths('.git'),
)


@dataclass(frozen=True)
class UniqueSet:
    directories: Sequence[RelPath]
    '''
    Directories which don't exist in the target at all, their contents are implied
    '''

    files: Sequence[RelPath]
    '''
    Files outside of the unique directories
    '''

    def __post_init__(self) -> None:
        for f in self.files:
            for d in self.directories:
                if f.is_under(d):
                    raise InvariantViolation(f'{f} is already covered by unique directory {d}')

    def paths(self) -> list[RelPath]:
        return [*self.directories, *self.files]


@dataclass(frozen=True)
class MappingEntry:
    source: str
    destination: str

    @classmethod
    def file(cls, path: RelPath) -> MappingEntry:
        return cls(source=str(path), destination=str(path))

    @classmethod
    def glob(cls, directory: RelPath) -> MappingEntry:
        assert not directory.is_root, directory
        return cls(source=f'{directory}{SEP}*', destination=f'{directory}{SEP}')

    @property
    def line(self) -> str:
        return f'{self.source}\t{self.destination}'


def as_relpaths(paths: Iterable[str | RelPath]) -> list[RelPath]:
    return [RelPath.of(p) for p in paths]


### helper to define paramertized tests in function's body
from .utils import under_pytest

if TYPE_CHECKING or under_pytest:
    import pytest

    parametrize = pytest.mark.parametrize
else:
    parametrize = lambda *_args, **_kwargs: (lambda f: f)
###
