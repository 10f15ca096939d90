#!/usr/bin/env python3
"""
Frame diagram: the editable tree of reference frames.

Invariants kept by FrameDiagram
- Frame 0 is the origin (0, 0) with source_index -1 and cannot be moved or deleted.
- Every other frame lies in the closed future light cone of its source.
- Cached cumulative physics on each frame is refreshed after every edit.
- Deleting a frame deletes its descendants; surviving indices, source
  indices and cartouche offsets are compacted.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from .data_models import ReferenceFrame, SpacetimePoint
from .errors import PositionValidationError, SourceFrameValidationError
from .relativity import (
    CumulativePhysics,
    calculate_cumulative_physics,
    calculate_velocity_ratio,
    frame_ancestry,
    is_reachable_from_source,
)
from .trajectories import CumulativeTrajectory, calculate_cumulative_trajectory, sample_frame_trajectory

logger = logging.getLogger(__name__)


def validate_position(x: float, t: float) -> None:
    """Raise PositionValidationError unless (x, t) is finite with t >= 0."""
    if not (math.isfinite(x) and math.isfinite(t)):
        raise PositionValidationError(f"Frame coordinates must be finite, got ({x}, {t})")
    if t < 0:
        raise PositionValidationError(f"Frame time must not be negative, got {t}")


class FrameDiagram:
    def __init__(self):
        self.frames: List[ReferenceFrame] = []
        self.cartouche_offsets: Dict[int, Tuple[float, float]] = {}
        self.selected_index = 0
        self.reset()

    def reset(self) -> None:
        self.frames = [ReferenceFrame(0.0, 0.0, -1)]
        self.cartouche_offsets = {}
        self.selected_index = 0

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def selected(self) -> ReferenceFrame:
        return self.frames[self.selected_index]

    # -----------------------
    # Editing
    # -----------------------

    def add_frame(self, x: float, t: float, source_index: int) -> int:
        """
        Append a frame reached from frame `source_index`.

        Returns:
            Index of the new frame.

        Raises:
            PositionValidationError: for non-finite or negative-time coordinates.
            SourceFrameValidationError: if the source does not exist or cannot reach (x, t).
        """
        validate_position(x, t)
        if not 0 <= source_index < len(self.frames):
            raise SourceFrameValidationError(f"No frame at index {source_index}")
        if not is_reachable_from_source(x, t, self.frames[source_index]):
            raise SourceFrameValidationError(
                f"({x:.2f}, {t:.2f}) is outside the future light cone of frame {source_index}")
        self.frames.append(ReferenceFrame(x, t, source_index))
        index = len(self.frames) - 1
        self._refresh_physics()
        logger.debug("Frame %d added at (%.2f, %.2f) from %d", index, x, t, source_index)
        return index

    def create_frame_at(self, x: float, t: float) -> Optional[int]:
        """Add a frame whose source is the newest frame containing (x, t); None if there is none."""
        source = self.containing_frame(x, t)
        if source is None:
            return None
        return self.add_frame(x, t, source)

    def move_frame(self, index: int, x: float, t: float) -> bool:
        """
        Move a frame if it stays reachable from its source and keeps all of its
        children reachable. Returns False and leaves the diagram untouched otherwise.
        """
        if index <= 0 or index >= len(self.frames):
            return False
        if not (math.isfinite(x) and math.isfinite(t)):
            return False
        frame = self.frames[index]
        if not is_reachable_from_source(x, t, self.frames[frame.source_index]):
            return False
        moved = SpacetimePoint(x, t)
        for child in self.children_of(index):
            if not is_reachable_from_source(self.frames[child].x, self.frames[child].t, moved):
                return False
        frame.x, frame.t = x, t
        self._refresh_physics()
        return True

    def delete_frame(self, index: int) -> List[int]:
        """
        Delete a frame with all its descendants.

        Returns:
            The deleted indices in descending order (empty for the origin or a bad index).
        """
        if index <= 0 or index >= len(self.frames):
            return []
        doomed = sorted(self._descendants(index) | {index}, reverse=True)
        for i in doomed:
            del self.frames[i]

        def shift(i: int) -> int:
            return i - sum(1 for d in doomed if d < i)

        for frame in self.frames:
            if frame.source_index > 0:
                frame.source_index = shift(frame.source_index)
        self.cartouche_offsets = {
            shift(i): offset for i, offset in self.cartouche_offsets.items() if i not in doomed
        }
        self.selected_index = 0
        self._refresh_physics()
        logger.debug("Deleted frames %s", doomed)
        return doomed

    def select(self, index: int) -> bool:
        if 0 <= index < len(self.frames):
            self.selected_index = index
            return True
        return False

    def set_cartouche_offset(self, index: int, dx: float, dy: float) -> None:
        self.cartouche_offsets[index] = (dx, dy)

    def cartouche_offset(self, index: int) -> Tuple[float, float]:
        return self.cartouche_offsets.get(index, (0.0, 0.0))

    # -----------------------
    # Queries
    # -----------------------

    def containing_frame(self, x: float, t: float) -> Optional[int]:
        """Newest frame whose future light cone contains (x, t)."""
        for i in range(len(self.frames) - 1, -1, -1):
            if is_reachable_from_source(x, t, self.frames[i]):
                return i
        return None

    def velocity_ratio_at(self, x: float, t: float) -> Optional[Tuple[int, float]]:
        """(containing frame, v/c needed to reach (x, t) from it), or None outside every cone."""
        index = self.containing_frame(x, t)
        if index is None:
            return None
        frame = self.frames[index]
        return index, calculate_velocity_ratio(x - frame.x, 0.0, t - frame.t)

    def children_of(self, index: int) -> List[int]:
        return [i for i, f in enumerate(self.frames) if f.source_index == index]

    def _descendants(self, index: int) -> set:
        found = set()
        pending = self.children_of(index)
        while pending:
            child = pending.pop()
            if child not in found:
                found.add(child)
                pending.extend(self.children_of(child))
        return found

    def physics_of(self, index: int) -> CumulativePhysics:
        return calculate_cumulative_physics(index, self.frames)

    def chain_to(self, index: int) -> List[ReferenceFrame]:
        """Frames from the origin down to `index`."""
        return [self.frames[i] for i in frame_ancestry(index, self.frames)]

    def cumulative_trajectory_to(self, index: int) -> CumulativeTrajectory:
        return calculate_cumulative_trajectory(self.chain_to(index))

    def trajectory_of(self, index: int) -> List[SpacetimePoint]:
        """Sampled path from the frame's source to the frame (empty for the origin)."""
        frame = self.frames[index]
        if frame.source_index < 0:
            return []
        return sample_frame_trajectory(self.frames[frame.source_index], frame)

    def frame_at_screen(self, view, sx: float, sy: float) -> Optional[int]:
        return view.frame_at_screen(self.frames, sx, sy)

    def _refresh_physics(self) -> None:
        for i, frame in enumerate(self.frames):
            physics = calculate_cumulative_physics(i, self.frames)
            frame.cumulative_velocity = physics.cumulative_velocity
            frame.cumulative_proper_time = physics.cumulative_proper_time
            frame.total_coordinate_time = physics.total_coordinate_time

    # -----------------------
    # Scenarios
    # -----------------------

    def load_twin_paradox(self, total_time: float = 300, distance: float = 120) -> None:
        """
        Stay-at-home twin goes straight to (0, T); the travelling twin turns
        around at (distance, 0.45 T) and meets them back at (0, T).
        """
        self.reset()
        self.add_frame(0.0, total_time, 0)
        turnaround = self.add_frame(distance, total_time * 0.45, 0)
        self.add_frame(0.0, total_time, turnaround)
        self.selected_index = len(self.frames) - 1

    # -----------------------
    # Persistence
    # -----------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coneOrigins": [f.to_dict() for f in self.frames],
            "cartoucheOffsets": {str(i): {"x": dx, "y": dy} for i, (dx, dy) in self.cartouche_offsets.items()},
            "selectedReferenceFrame": self.selected_index,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FrameDiagram":
        """
        Rebuild a diagram from to_dict() output.

        Raises:
            SourceFrameValidationError: for dangling or cyclic source indices.
            PositionValidationError: for bad coordinates.
        """
        diagram = cls()
        origins = data.get("coneOrigins") or []
        if origins:
            frames = [ReferenceFrame.from_dict(item) for item in origins]
            for frame in frames:
                validate_position(frame.x, frame.t)
                if frame.source_index != -1 and not 0 <= frame.source_index < len(frames):
                    raise SourceFrameValidationError(f"Dangling source index {frame.source_index}")
            diagram.frames = frames
            diagram._refresh_physics()
        for key, offset in (data.get("cartoucheOffsets") or {}).items():
            index = int(key)
            if 0 <= index < len(diagram.frames):
                diagram.cartouche_offsets[index] = (float(offset["x"]), float(offset["y"]))
        diagram.select(int(data.get("selectedReferenceFrame", 0)))
        return diagram
