# Tests for OmegaConf-driven algebra construction (bladeworks/config.py)

import pytest
import torch
from omegaconf import OmegaConf

from bladeworks.algebra import Algebra
from bladeworks.config import PRESETS_PATH, algebra_from_config, build_preset, load_presets
from bladeworks.errors import ConstructionError


def test_presets_file_ships():
    assert PRESETS_PATH.exists()
    presets = load_presets()
    for name in ("euclidean2d", "euclidean3d", "spacetime", "pga2d", "cga2d_root", "cga2d"):
        assert name in presets


@pytest.mark.parametrize("name,squares", [
    ("euclidean2d", (1, 1)),
    ("euclidean3d", (1, 1, 1)),
    ("spacetime", (1, 1, -1)),
    ("pga2d", (0, 1, 1)),
    ("cga2d_root", (1, 1, 1, -1)),
    ("cga2d", (1, 1, 0, 0)),
])
def test_build_preset(name, squares):
    alg = build_preset(name)
    assert isinstance(alg, Algebra)
    assert alg.squares == squares


def test_cga_preset_has_parent():
    alg = build_preset("cga2d")
    assert alg.parent is not None
    assert alg.parent.squares == (1, 1, 1, -1)
    assert alg.metrics[1][2, 3].item() == -1.0


def test_unknown_preset():
    with pytest.raises(ConstructionError, match="Unknown preset"):
        build_preset("octonions")


def test_counts_node_from_dict():
    alg = algebra_from_config({"counts": {"p": 1, "q": 1}})
    assert alg.squares == (1, -1)


def test_basis_node():
    cfg = OmegaConf.create({"basis": [{"square": 1, "label": "x"}, {"square": -1, "label": "t"}]})
    alg = algebra_from_config(cfg)
    assert alg.blade_labels == ["e", "ex", "et", "ext"]


def test_inline_parent():
    cfg = OmegaConf.create({
        "parent": {"counts": {"p": 2}},
        "basis": [{"square": 1, "label": "a"}, {"square": 1, "label": "b"}],
        "transform": [[0, 1], [1, 0]],
    })
    alg = algebra_from_config(cfg)
    assert alg.parent.squares == (1, 1)
    assert torch.equal(alg.metrics[1], torch.eye(2, dtype=torch.float64))


def test_parent_by_name_from_custom_presets(tmp_path):
    path = tmp_path / "algebras.yaml"
    path.write_text(
        "root:\n"
        "  counts: {p: 1, q: 1}\n"
        "lightcone:\n"
        "  parent: root\n"
        "  basis:\n"
        "    - {square: 0, label: o}\n"
        "    - {square: 0, label: i}\n"
        "  transform: [[0.5, 1], [0.5, -1]]\n"
    )
    presets = load_presets(path)
    alg = build_preset("lightcone", presets)
    assert alg.squares == (0, 0)
    # eo = (e1 + e2) / 2, ei = e1 - e2 over Cl(1,1)
    assert alg.metrics[1][0, 1].item() == pytest.approx(1.0)
    assert alg.metrics[1][0, 0].item() == pytest.approx(0.0)


def test_parent_cycle(tmp_path):
    path = tmp_path / "cycle.yaml"
    path.write_text(
        "a:\n"
        "  parent: b\n"
        "  basis: [{square: 1, label: x}]\n"
        "  transform: [[1]]\n"
        "b:\n"
        "  parent: a\n"
        "  basis: [{square: 1, label: x}]\n"
        "  transform: [[1]]\n"
    )
    with pytest.raises(ConstructionError, match="Cyclic"):
        build_preset("a", load_presets(path))


@pytest.mark.parametrize("node", [
    {},
    {"counts": {"p": 2}, "basis": [{"square": 1, "label": "x"}]},
    {"counts": {"p": 2}, "parent": "euclidean2d"},
    {"basis": [{"square": 1, "label": "x"}], "transform": [[1]]},
    {"basis": [{"square": 1, "label": "x"}], "parent": "missing", "transform": [[1]]},
])
def test_malformed_nodes(node):
    with pytest.raises(ConstructionError):
        algebra_from_config(node)


def test_non_mapping_node():
    with pytest.raises(ConstructionError):
        algebra_from_config([1, 2, 3])


def test_non_mapping_presets_file(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n")
    with pytest.raises(ConstructionError):
        load_presets(path)
