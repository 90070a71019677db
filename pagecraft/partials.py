"""Load reusable template fragments from an includes directory.

Every file below the root, hidden entries included, becomes one partial keyed
by its ``/``-separated path relative to the root. The mapping feeds a
:class:`jinja2.DictLoader`, so ``{% include "nav/menu.html" %}`` resolves
against it.

Example
-------
>>> from pathlib import Path
>>> from pagecraft.partials import load_partials
>>> load_partials(Path("_includes"))  # doctest: +SKIP
{'footer.html': '<footer>…</footer>', 'nav/menu.html': '<nav>…</nav>'}
"""

from __future__ import annotations

import logging
from pathlib import Path

from pagecraft.errors import ResourceError

logger = logging.getLogger(__name__)


def load_partials(root: Path) -> dict[str, str]:
    """Read every file under ``root`` into a partial-source mapping.

    Parameters
    ----------
    root : Path
        Includes directory. A missing directory yields an empty mapping.

    Returns
    -------
    dict[str, str]
        Template source keyed by POSIX-style relative path. Should two files
        map to the same key, the one read last wins.

    Raises
    ------
    ResourceError
        If ``root`` is not a directory, or any file cannot be read or
        decoded as UTF-8. No partial mapping is returned in that case.
    """
    if not root.exists():
        logger.debug("Includes directory %s does not exist; no partials", root)
        return {}
    if not root.is_dir():
        msg = f"Includes path '{root}' is not a directory."
        raise ResourceError(msg, path=root)

    logger.debug("Loading partials from %s", root)
    partials: dict[str, str] = {}
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        rel_path = path.relative_to(root).as_posix()
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Unable to read partial '{path}': {exc}"
            raise ResourceError(msg, path=path) from exc
        logger.debug("Loaded partial %r", rel_path)
        partials[rel_path] = content
    return partials


__all__ = ["load_partials"]
