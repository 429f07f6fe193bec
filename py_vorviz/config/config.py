from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Visualizer settings pulled from environment variables."""

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    # Viewport Configuration
    viewport_size_px: int = Field(default=600, gt=0, description="Side of the square drawing surface in pixels")
    point_radius_px: float = Field(default=4.5, gt=0, description="Radius of input point markers in pixels")
    vertex_radius_px: float = Field(default=3.0, gt=0, description="Radius of diagram vertex markers in pixels")
    circle_segments: int = Field(default=20, ge=3, description="Boundary points of a marker fan")

    # Geometry Configuration
    region_bloat_factor: float = Field(default=1.2, gt=0, description="Half-extent of the bounding square relative to the site extent")
    curve_tolerance: float = Field(default=1e-3, gt=0, description="Maximum arc deviation relative to the bounding square width")

    # Host Configuration
    input_glob: str = Field(default="*.txt", description="Pattern for input files when browsing a directory")
    snapshot_dpi: int = Field(default=100, gt=0, description="Resolution used when exporting snapshots")

    class Config:
        env_prefix = "VORVIZ_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
