"""
solgas/loader.py
════════════════

File boundary: syntax trees in, source text for snippets.

solgas does not parse Solidity itself.  Trees come from an
``@solidity-parser/parser``-compatible front end, serialised as JSON:

    const ast = parser.parse(src, { loc: true });
    fs.writeFileSync("Token.json", JSON.stringify(ast));

License: MIT — same as solgas.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from solgas.errors import SourceFileError, TreeLoadError

_log = logging.getLogger(__name__)

TREE_EXTENSIONS: Tuple[str, ...] = (".json",)
SOURCE_EXTENSION = ".sol"

PathLike = Union[str, Path]


def _resolve(raw: PathLike) -> Path:
    p = Path(raw).expanduser()
    if not p.exists():
        raise SourceFileError(p, "File not found")
    if not p.is_file():
        raise SourceFileError(p, "Not a file")
    return p


def load_tree(path: PathLike) -> Dict[str, Any]:
    """
    Read a JSON syntax tree.

    Raises
    ------
    SourceFileError  missing file or unsupported extension
    TreeLoadError    invalid JSON, or a root that is not a typed node
    """
    p = _resolve(path)
    if p.suffix.lower() not in TREE_EXTENSIONS:
        raise SourceFileError(
            p, f"Unsupported file extension '{p.suffix}' (expected .json)"
        )

    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceFileError(p, f"Cannot read file ({exc})") from exc

    try:
        tree = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TreeLoadError(p, exc.msg, line=exc.lineno) from exc

    if not isinstance(tree, dict) or not isinstance(tree.get("type"), str):
        raise TreeLoadError(p, "root is not a syntax tree node")

    _log.debug("Loaded %s tree from %s", tree["type"], p)
    return tree


def source_path_for(tree_path: PathLike) -> Path:
    """``Token.json`` → ``Token.sol`` in the same directory."""
    return Path(tree_path).with_suffix(SOURCE_EXTENSION)


def read_source(path: Optional[PathLike]) -> Optional[str]:
    """
    Solidity source text for code snippets, or None when unavailable.

    Snippets are optional, so a missing or unreadable file is not an error.
    """
    if path is None:
        return None
    p = Path(path).expanduser()
    if not p.is_file():
        _log.debug("No source text at %s", p)
        return None
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        _log.warning("Cannot read source %s: %s", p, exc)
        return None


__all__ = [
    "TREE_EXTENSIONS",
    "load_tree",
    "source_path_for",
    "read_source",
]
