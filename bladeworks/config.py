# Bladeworks: Clifford Algebra Table Engine
# Copyright (C) 2026 Eunkyum Kim <nemonanconcode@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
#
# This project is fully open-source, including for commercial use.
# We believe Geometric Algebra is the future of AI, and we want
# the industry to build upon this "unbending" paradigm.

"""Building algebras from OmegaConf configuration nodes.

A node holds either ``counts: {p, q, r}`` or an explicit ``basis`` list,
optionally with a ``parent`` (preset name or inline node) and a grade-1
``transform``. The packaged presets live in ``conf/algebras.yaml``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from omegaconf import DictConfig, ListConfig, OmegaConf

from log import get_logger

from .algebra import Algebra
from .errors import ConstructionError

logger = get_logger(__name__)

PRESETS_PATH = Path(__file__).resolve().parent / "conf" / "algebras.yaml"

ConfigNode = Union[DictConfig, Mapping]


def load_presets(path: Optional[Union[str, Path]] = None) -> DictConfig:
    """Load a YAML file of named algebra nodes (the packaged presets by default)."""
    cfg = OmegaConf.load(path or PRESETS_PATH)
    if not isinstance(cfg, DictConfig):
        raise ConstructionError(f"Preset file {path or PRESETS_PATH} must hold a mapping of presets")
    return cfg


def _as_node(node: ConfigNode) -> DictConfig:
    if isinstance(node, DictConfig):
        return node
    if isinstance(node, Mapping):
        return OmegaConf.create(dict(node))
    raise ConstructionError(f"Algebra config must be a mapping, got {type(node).__name__}")


def _container(value):
    if isinstance(value, (DictConfig, ListConfig)):
        return OmegaConf.to_container(value, resolve=True)
    return value


def algebra_from_config(
    node: ConfigNode,
    presets: Optional[DictConfig] = None,
    _chain: Tuple[str, ...] = (),
) -> Algebra:
    """Build an :class:`Algebra` from one config node.

    Args:
        node: ``counts`` node or ``basis`` node (see module docstring).
        presets (DictConfig, optional): Named nodes that ``parent`` may refer to.
            Defaults to the packaged presets.

    Raises:
        ConstructionError: Malformed node, unknown or cyclic parent, or any
            error of the algebra itself.
    """
    node = _as_node(node)
    device = node.get("device", "cpu")
    has_counts = "counts" in node
    has_basis = "basis" in node
    if has_counts == has_basis:
        raise ConstructionError("Algebra config needs exactly one of 'counts' or 'basis'")

    if has_counts:
        if node.get("parent") is not None or node.get("transform") is not None:
            raise ConstructionError("'counts' algebras are roots; drop 'parent'/'transform'")
        counts = node.counts
        return Algebra.from_counts(
            counts.get("p", 0), counts.get("q", 0), counts.get("r", 0), device=device,
        )

    spec = _container(node.basis)
    parent_node = node.get("parent")
    transform = _container(node.get("transform"))
    if parent_node is None:
        if transform is not None:
            raise ConstructionError("A 'transform' needs a 'parent'")
        return Algebra.from_basis_spec(spec, device=device)

    parent = _resolve_parent(parent_node, presets, _chain)
    return Algebra.from_basis_spec_with_parent(spec, parent, transform, device=device)


def _resolve_parent(parent_node, presets: Optional[DictConfig], chain: Tuple[str, ...]) -> Algebra:
    if isinstance(parent_node, str):
        if parent_node in chain:
            raise ConstructionError(f"Cyclic parent chain: {' -> '.join(chain + (parent_node,))}")
        if presets is None:
            presets = load_presets()
        if parent_node not in presets:
            raise ConstructionError(f"Unknown parent preset {parent_node!r}")
        logger.debug("Resolving parent preset %s", parent_node)
        return algebra_from_config(presets[parent_node], presets, chain + (parent_node,))
    return algebra_from_config(parent_node, presets, chain)


def build_preset(name: str, presets: Optional[DictConfig] = None) -> Algebra:
    """Build a named preset (``cga2d``, ``spacetime``, ...)."""
    if presets is None:
        presets = load_presets()
    if name not in presets:
        raise ConstructionError(f"Unknown preset {name!r}; available: {sorted(presets.keys())}")
    return algebra_from_config(presets[name], presets, (name,))
