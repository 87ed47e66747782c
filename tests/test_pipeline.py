"""End-to-end tests for darklens.pipeline and the plot registry."""

import copy
import os
from typing import Any, Dict

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pytest
import yaml

from darklens.compositing.utils import FrameData
from darklens.lensing import LensingSession, LensModel, LensParameters
from darklens.pipeline import Pipeline, run_pipeline, run_pipeline_from_config
from darklens.plotting import get_plot_registry


# ---- Fixtures ----

@pytest.fixture(scope="session")
def master_config() -> Dict[str, Any]:
    here = os.path.abspath(os.path.dirname(__file__))
    path = os.path.join(here, "..", "configs", "master_config.yaml")
    with open(path, "r") as f:
        return yaml.safe_load(f)


@pytest.fixture
def config(master_config, tmp_path) -> Dict[str, Any]:
    """Small, fast copy of the master configuration writing into tmp_path."""
    cfg = copy.deepcopy(master_config)
    cfg["render"]["shape"] = [40, 60]
    cfg["hsw_lookup"]["size"] = 256
    cfg["hsw_lookup"]["depth_steps"] = 80
    cfg["plotting"]["output_dir"] = str(tmp_path / "outputs")
    return cfg


# ---- Pipeline ----

def test_pipeline_renders_frame(config):
    frame = run_pipeline_from_config(config, verbose=False)
    assert isinstance(frame, FrameData)
    assert frame.image.shape == (40, 60, 3)
    assert np.all(np.isfinite(frame.image))
    assert frame.layer_count == config["render"]["layers"]
    assert frame.params.model is LensModel.HSW_VOID
    assert frame.source_names == ["grid"]
    assert frame.config is config


def test_pipeline_rejects_invalid_config(config):
    config["lens"]["model"] = "Wormhole"
    with pytest.raises(ValueError):
        run_pipeline_from_config(config, verbose=False)


def test_pipeline_builds_lookup_for_hsw_only(config):
    pipeline = Pipeline(verbose=False)
    assert pipeline.build_session(config).lookup is not None
    config["lens"]["model"] = "NFW"
    assert pipeline.build_session(config).lookup is None


def test_pipeline_with_uploaded_sources(config, tmp_path):
    rng = np.random.default_rng(1)
    paths = []
    for i in range(2):
        path = tmp_path / f"layer_{i}.png"
        plt.imsave(path, rng.random((20, 30, 3)))
        paths.append(str(path))
    config["lens"]["model"] = "VoidToy"
    config["render"]["sources"] = paths
    config["render"]["layers"] = 5

    frame = run_pipeline_from_config(config, verbose=False)
    assert frame.layer_count == 2
    assert frame.source_names == ["layer_0.png", "layer_1.png"]


def test_pipeline_missing_source_raises(config, tmp_path):
    config["render"]["sources"] = [str(tmp_path / "nope.png")]
    with pytest.raises(ValueError, match="not found"):
        run_pipeline_from_config(config, verbose=False)


def test_run_pipeline_from_yaml_with_plots(config, tmp_path, capsys):
    config["plotting"]["enabled"] = True
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(config, f)

    run_pipeline(str(path), verbose=True)
    out = capsys.readouterr().out
    assert "DARKLENS PIPELINE EXECUTION" in out
    assert "Warning" not in out

    run_dir = tmp_path / "outputs" / config["run_name"]
    for name in ("density_profile.png", "deflection_curve.png", "hsw_lookup.png"):
        assert (run_dir / "lens" / name).exists()
    for name in ("frame.png", "frame_overview.png"):
        assert (run_dir / "frame" / name).exists()


# ---- Plot registry ----

def test_registry_discovers_plots():
    names = set(get_plot_registry().plots)
    assert {"plot_density_profile", "plot_deflection_curve", "plot_hsw_lookup",
            "plot_frame", "plot_frame_overview"} <= names


def test_registry_skips_lookup_plots_without_table():
    session = LensingSession(LensParameters(model=LensModel.POINT_MASS))
    applicable = get_plot_registry().get_applicable_plots({"session": session, "frame_data": None})
    names = {meta.name for meta in applicable}
    assert "plot_hsw_lookup" not in names
    assert "plot_frame" not in names
    assert "plot_deflection_curve" in names
