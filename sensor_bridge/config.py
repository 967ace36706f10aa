"""
config.py

Construction-time options of a :class:`~sensor_bridge.SensorBridge`, with
YAML (de)serialisation.

Example ``bridge.yaml``::

    tracking_frame: base_link
    num_subdivisions_per_laser_scan: 10
    lookup_transform_timeout_sec: 0.2
    point_cloud_vendors:
      points2: velodyne
    static_transforms:
      laser:
        translation: [0.2, 0.0, 0.1]
        rotation:
          quaternion: [1.0, 0.0, 0.0, 0.0]

``static_transforms`` lists fixed sensor → tracking extrinsics and can be
turned into a :class:`~sensor_bridge.transform_buffer.TransformBuffer` with
:meth:`BridgeOptions.make_transform_buffer`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml

from sensor_bridge.lidar.point_cloud import PointCloudVendor
from sensor_bridge.transform_buffer import StampedTransform, TransformBuffer


@dataclass
class BridgeOptions:
    """Options of one bridge instance.

    Attributes:
        tracking_frame: Frame every measurement is expressed in.
        num_subdivisions_per_laser_scan: Slices per planar scan (>= 1).
        lookup_transform_timeout_sec: Upper bound on transform lookups (>= 0).
        point_cloud_vendors: Vendor tag per point-cloud sensor id; sensors
            not listed are treated as generic.
        static_transforms: Fixed ``frame → tracking_frame`` extrinsics.
    """

    tracking_frame: str = "base_link"
    num_subdivisions_per_laser_scan: int = 1
    lookup_transform_timeout_sec: float = 0.2
    point_cloud_vendors: Dict[str, str] = field(default_factory=dict)
    static_transforms: Dict[str, StampedTransform] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.tracking_frame:
            raise ValueError("tracking_frame must not be empty")
        if self.num_subdivisions_per_laser_scan < 1:
            raise ValueError(
                f"num_subdivisions_per_laser_scan must be at least 1, got {self.num_subdivisions_per_laser_scan}"
            )
        if self.lookup_transform_timeout_sec < 0:
            raise ValueError(
                f"lookup_transform_timeout_sec must be non-negative, got {self.lookup_transform_timeout_sec}"
            )

    def vendor_for(self, sensor_id: str) -> PointCloudVendor:
        """Return the configured point-cloud vendor of *sensor_id*."""
        return PointCloudVendor.from_tag(self.point_cloud_vendors.get(sensor_id))

    def make_transform_buffer(self, cache_time: float = 10.0) -> TransformBuffer:
        """Return a buffer pre-loaded with :attr:`static_transforms`."""
        return TransformBuffer.from_static_transforms(self.tracking_frame, self.static_transforms, cache_time)

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        static = {}
        for frame, stamped in self.static_transforms.items():
            entry = stamped.to_dict()
            entry.pop("timestamp")
            static[frame] = entry
        return {
            "tracking_frame": self.tracking_frame,
            "num_subdivisions_per_laser_scan": int(self.num_subdivisions_per_laser_scan),
            "lookup_transform_timeout_sec": float(self.lookup_transform_timeout_sec),
            "point_cloud_vendors": dict(self.point_cloud_vendors),
            "static_transforms": static,
        }

    def to_yaml(self, path: str | os.PathLike) -> None:
        """Write the options to a YAML file."""
        Path(path).write_text(yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False))

    @classmethod
    def from_dict(cls, data: dict) -> "BridgeOptions":
        static_data = data.get("static_transforms") or {}
        return cls(
            tracking_frame=str(data.get("tracking_frame", "base_link")),
            num_subdivisions_per_laser_scan=int(data.get("num_subdivisions_per_laser_scan", 1)),
            lookup_transform_timeout_sec=float(data.get("lookup_transform_timeout_sec", 0.2)),
            point_cloud_vendors={str(k): str(v) for k, v in (data.get("point_cloud_vendors") or {}).items()},
            static_transforms={str(frame): StampedTransform.from_dict(entry) for frame, entry in static_data.items()},
        )

    @classmethod
    def from_yaml(cls, path: str | os.PathLike) -> "BridgeOptions":
        """Load options from a YAML file."""
        raw = yaml.safe_load(Path(path).read_text()) or {}
        return cls.from_dict(raw)
