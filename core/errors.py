from __future__ import annotations


class ROIEngineError(ValueError):
    """Base class for the few conditions the engine refuses to absorb."""


class NoProjectionDataError(ROIEngineError):
    """Baseline or scenario projection could not be resolved; nothing to compare."""

    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(
            f"No usable projection data: missing {', '.join(self.missing)} projection(s)."
        )


class GridTooLargeError(ROIEngineError):
    """Sensitivity sweep cardinality exceeds the configured ceiling."""

    def __init__(self, n_cells: int, max_cells: int):
        self.n_cells = n_cells
        self.max_cells = max_cells
        super().__init__(
            f"Sensitivity grid has {n_cells:,} combinations; the limit is {max_cells:,}. "
            f"Shorten one or more sweep lists."
        )
