"""Application-layer merge policy.

Purpose
-------
Fold a sequence of per-file property trees into one tree while tracking which
layer supplied each leaf. Mirrors the precedence rule of directory loading:
base first, then profiles in active order, later layers winning.

Contents
    - ``Layer``: the ``(profile, tree, path)`` tuple consumed by the fold.
    - ``merge_layers``: public entry point driven by a simple loop.
    - ``_record``: narrates how provenance is updated when leaves change.

System Role
-----------
Receives layers from :mod:`yodel.core` and returns data consumed by
:class:`yodel.domain.context.Context`. Remains free of I/O and strictly
sequential because the merge is right-biased.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from ..domain.context import SourceInfo
from ..domain.properties import Properties

Layer = Tuple[Optional[str], Properties, Optional[str]]
"""``(profile, tree, source_path)``; ``profile`` is ``None`` for base/inline layers."""


def merge_layers(layers: Iterable[Layer]) -> tuple[Properties, dict[str, SourceInfo]]:
    """Merge *layers* left to right honouring precedence and provenance.

    Parameters
    ----------
    layers:
        Iterable of ``(profile, tree, source_path)`` tuples ordered from
        lowest to highest precedence.

    Returns
    -------
    tuple[Properties, dict[str, SourceInfo]]
        ``(merged_tree, provenance)`` where ``provenance`` maps rendered paths
        to ``{"profile", "path", "key"}``.

    Examples
    --------
    >>> from yodel.domain.path import PropertyPath
    >>> merged, meta = merge_layers([
    ...     (None, Properties.from_native({"service": {"timeout": 5, "retries": 1}}), "config.yaml"),
    ...     ("dev", Properties.from_native({"service": {"timeout": 10}}), "config-dev.yaml"),
    ... ])
    >>> merged[PropertyPath.parse("service.timeout")], meta["service.timeout"]["profile"]
    (10, 'dev')
    >>> meta["service.retries"]["path"]
    'config.yaml'
    """

    merged = Properties()
    meta: dict[str, SourceInfo] = {}
    for profile, tree, path in layers:
        merged = merged.merge(tree)
        _record(meta, tree, profile, path)
    return merged, meta


def _record(meta: dict[str, SourceInfo], tree: Properties, profile: str | None, path: str | None) -> None:
    """Point every leaf of *tree* at the layer that just supplied it."""

    for property_path in tree:
        key = str(property_path)
        meta[key] = SourceInfo(profile=profile, path=path, key=key)
