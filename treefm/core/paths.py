"""
Path helpers: conflict-free destination names and recursive directory copy.
"""
import os
import shutil


def split_name(name):
    """Split a file name into (stem, extension).

    The extension starts at the last dot unless that dot is the first
    character, so ``.bashrc`` has no extension and ``a.tar.gz`` splits into
    ``('a.tar', '.gz')``.
    """
    dot = name.rfind('.')
    if dot <= 0:
        return name, ''
    return name[:dot], name[dot:]


def final_component(path):
    """Return the last path component or raise ValueError if there is none."""
    name = os.path.basename(os.path.normpath(path))
    if not name or name in (os.curdir, os.pardir) or name == os.sep:
        raise ValueError(f'Path has no file name: {path!r}')
    return name


def unique_path(path):
    """Return ``path`` if it is free, else the first free ``stem (N)ext`` sibling.

    Pure query: nothing is created, so the caller should use the result right
    away. Two concurrent callers can still race for the same name.
    """
    if not os.path.lexists(path):
        return path
    parent = os.path.dirname(path)
    stem, ext = split_name(os.path.basename(path))
    counter = 1
    while True:
        candidate = os.path.join(parent, f'{stem} ({counter}){ext}')
        if not os.path.lexists(candidate):
            return candidate
        counter += 1


def copy_tree(src, dst):
    """Copy directory ``src`` to the new path ``dst``.

    Stops at the first failing entry and leaves whatever was already copied
    in place.
    """
    os.makedirs(dst)
    with os.scandir(src) as it:
        children = sorted(it, key=lambda entry: entry.name)
    for child in children:
        target = os.path.join(dst, child.name)
        if child.is_symlink():
            os.symlink(os.readlink(child.path), target)
        elif child.is_dir(follow_symlinks=False):
            copy_tree(child.path, target)
        else:
            shutil.copy2(child.path, target)


def is_inside(path, root):
    """Return True when ``path`` equals ``root`` or lies underneath it."""
    p1 = os.path.normcase(os.path.realpath(path))
    p2 = os.path.normcase(os.path.realpath(root))
    return p1 == p2 or p1.startswith(p2.rstrip(os.sep) + os.sep)
