from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from modmangen.core.layout import MODMAN_DIR
from modmangen.core.utils import make_tree


@dataclass
class Install:
    target: Path
    module: Path


def magento_install(tmp_path: Path, *, module: str = 'Foo_Bar') -> Install:
    '''
    Typical Magento 1 layout with a modman module checked out in .modman
    '''
    target = make_tree(
        tmp_path / 'magento',
        'app/code/community/',
        'app/code/local/',
        'app/design/frontend/base/default/layout/',
        'app/design/frontend/base/default/template/',
        'app/etc/modules/Mage_All.xml',
        'js/prototype/prototype.js',
        'js/scriptaculous/effects.js',
        'lib/Varien/Object.php',
        'skin/frontend/base/default/css/',
        'index.php',
    )
    mdir = make_tree(
        target / MODMAN_DIR / module,
        '.git/HEAD',
        '.git/refs/heads/master',
        '.gitignore',
        'README.md',
        'modman',
        'app/code/community/Foo/Bar/etc/config.xml',
        'app/code/community/Foo/Bar/Model/Observer.php',
        'app/design/frontend/base/default/layout/foo_bar.xml',
        'app/design/frontend/base/default/template/foo/bar/view.phtml',
        'app/design/frontend/base/default/template/foo/bar/list.phtml',
        'app/etc/modules/Foo_Bar.xml',
        'js/foo/bar.js',
        'js/foo/baz.js',
        'js/scriptaculous/foo_effects.js',
        'lib/Foo/Client.php',
        'lib/Bar/Client.php',
        'skin/frontend/base/default/css/foo_bar.css',
        'shell/foo_bar.php',
    )
    return Install(target=target, module=mdir)


def strs(paths) -> list[str]:
    return [str(p) for p in paths]
