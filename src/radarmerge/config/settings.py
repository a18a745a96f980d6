from __future__ import annotations
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from radarmerge.geo.earth import CURVATURE_COEFFICIENT, EARTH_RADIUS_M
from radarmerge.geo.geometry import Point
from radarmerge.models.radar import RadarParams


class StyleConfig(BaseModel):
    width: int = Field(800, gt=0)
    height: int = Field(600, gt=0)
    background: str = "#0a0f1a"
    merged_color: str = "#06b6d4"
    hole_color: str = "#ef4444"
    obstacle_color: str = "#92400e"
    palette: List[str] = ["#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6"]
    precision: int = Field(1, ge=0)


class PipelineConfig(BaseModel):
    ray_count: int = Field(72, ge=3)
    simplify_epsilon: float = Field(5.0, ge=0)
    smooth_iterations: int = Field(1, ge=0)


class ObstacleConfig(BaseModel):
    center: Tuple[float, float]
    rx: float = Field(50.0, gt=0)
    ry: float = Field(50.0, gt=0)
    height: float = 500.0
    name: str = ""


class TerrainConfig(BaseModel):
    earth_radius_m: float = Field(EARTH_RADIUS_M, gt=0)
    curvature_coefficient: float = Field(CURVATURE_COEFFICIENT, ge=0)
    range_tolerance: float = Field(0.01, gt=0, lt=1)
    los_samples: int = Field(40, ge=1)
    base_elevation_m: Optional[float] = None
    obstacles: List[ObstacleConfig] = []


class RadarConfig(BaseModel):
    id: int
    name: str = "Radar"
    position: Tuple[float, float]
    range_m: float = Field(50_000.0, ge=0)
    height_m: float = 10.0
    min_elevation: float = -0.01
    max_elevation: float = 0.7
    azimuth_start: float = 0.0
    azimuth_end: float = 2 * math.pi

    @model_validator(mode="after")
    def check_radar(self):
        # Same rules as RadarParams (azimuth order and span, elevation limits)
        self.to_params()
        return self

    def to_params(self) -> RadarParams:
        return RadarParams(
            id=self.id,
            name=self.name,
            position=Point(*self.position),
            range_m=self.range_m,
            height_m=self.height_m,
            min_elevation=self.min_elevation,
            max_elevation=self.max_elevation,
            azimuth_start=self.azimuth_start,
            azimuth_end=self.azimuth_end,
        )


class Settings(BaseModel):
    input_dir: str = "working_files/input"
    output_dir: str = "working_files/output"
    output_basename: str = "radar_coverage_result"
    export_formats: List[str] = ["SVG", "GeoJSON"]
    pipeline: PipelineConfig = PipelineConfig()
    terrain: TerrainConfig = TerrainConfig()
    radars: List[RadarConfig] = []
    style: StyleConfig = StyleConfig()
    logging: dict = Field(default_factory=lambda: {"level": "INFO"})

    # Internal field to track where config was loaded from
    _config_base_path: Optional[Path] = None

    @field_validator("export_formats")
    @classmethod
    def check_formats(cls, v):
        allowed = {"svg": "SVG", "geojson": "GeoJSON"}
        out = []
        for fmt in v:
            key = fmt.strip().lower()
            if key not in allowed:
                raise ValueError(f"Unsupported export format '{fmt}' (expected SVG or GeoJSON)")
            if allowed[key] not in out:
                out.append(allowed[key])
        return out

    @field_validator("radars")
    @classmethod
    def unique_radar_ids(cls, v):
        ids = [r.id for r in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Radar ids must be unique")
        return v

    def resolve_path(self, path_str: str) -> Path:
        """
        Resolve a path relative to the project root (parent of config dir) if it's not absolute.

        If config is at /app/config/config.yaml, 'working_files/output' resolves to
        /app/working_files/output, not /app/config/working_files/output.
        """
        p = Path(path_str)
        if p.is_absolute():
            return p

        if self._config_base_path:
            if self._config_base_path.name == 'config':
                return self._config_base_path.parent / p
            return self._config_base_path / p

        return Path.cwd() / p

    @classmethod
    def from_file(cls, path: str | Path) -> "Settings":
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        settings = cls(**data)

        # Store the base path of the config file to resolve relative paths later
        settings._config_base_path = path.parent.absolute()
        return settings


def load_settings(config_name: str = "config.yaml") -> Settings:
    """
    Load settings by searching for config.yaml in priority order:
    1. Current Working Directory (./config/config.yaml)
    2. Executable Directory ({exe_dir}/config/config.yaml) - for portable installs
    3. Legacy location (./config.yaml)
    """
    cwd_config = Path.cwd() / "config" / config_name
    if cwd_config.exists():
        return Settings.from_file(cwd_config)

    exe_dir = Path(sys.executable).parent
    exe_config = exe_dir / "config" / config_name
    if exe_config.exists():
        return Settings.from_file(exe_config)

    legacy_config = Path.cwd() / config_name
    if legacy_config.exists():
        return Settings.from_file(legacy_config)

    raise FileNotFoundError(
        f"Could not find {config_name} in {cwd_config} or {exe_config}. "
        "Please ensure the 'config' folder is present."
    )


__all__ = ["Settings", "load_settings"]
