from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

under_pytest = 'pytest' in sys.modules
### ugh. pretty horrible... but
# 'PYTEST_CURRENT_TEST' in os.environ
# doesn't work before we're actually inside the test.. and it might be late for decorators, for instance
###


def make_tree(root: Path, *entries: str) -> Path:
    '''
    Helper for tests/experiments: entries ending with / are directories, the rest are (empty) files

    >>> make_tree(tmp, 'app/code/Foo/', 'app/etc/modules/Foo.xml')
    '''
    root.mkdir(parents=True, exist_ok=True)
    for e in entries:
        p = root / e.strip('/')
        if e.endswith('/'):
            p.mkdir(parents=True, exist_ok=True)
        else:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(e)
    return root


def read_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        line = line.strip()
        if len(line) == 0:
            continue
        yield line
