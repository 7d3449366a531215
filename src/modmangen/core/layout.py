from __future__ import annotations

from pathlib import Path

from .common import ModmanGenError

MODMAN_DIR = '.modman'


class NotAModmanModule(ModmanGenError):
    pass


def find_target_directory(module_dir: Path) -> Path:
    '''
    Modman modules live in <target>/.modman/<module>, so the target is two levels up
    '''
    module_dir = Path(module_dir).absolute()
    if module_dir.parent.name != MODMAN_DIR:
        raise NotAModmanModule(f"It looks like {module_dir} isn't a modman module directory (expected <target>/{MODMAN_DIR}/<module>)")
    return module_dir.parent.parent


def test_find_target_directory(tmp_path: Path) -> None:
    import pytest

    module = tmp_path / MODMAN_DIR / 'Foo_Bar'
    assert find_target_directory(module) == tmp_path

    with pytest.raises(NotAModmanModule):
        find_target_directory(tmp_path / 'Foo_Bar')
