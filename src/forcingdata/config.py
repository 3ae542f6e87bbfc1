"""Configuration settings for the site forcing pipeline."""

from __future__ import annotations

from pathlib import Path


def project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def data_root() -> Path:
    return project_root() / "data"


def grid_dir(source: str) -> Path:
    return data_root() / "grids" / source


def co2_path(resolution: str = "annual") -> Path:
    return data_root() / "raw" / "co2" / f"co2_{resolution}_mlo.csv"


def forcing_output_path(site_id: str) -> Path:
    return data_root() / "clean" / "forcing" / f"{site_id}_forcing.csv"


def qa_plot_dir(site_id: str) -> Path:
    return data_root() / "qa" / site_id


def sites_csv_path() -> Path:
    return project_root() / "sites" / "sites.csv"
