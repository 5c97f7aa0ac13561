"""
ScanlineMapper - Maps a Bezier curve to one horizontal sample position per row.
"""

import numpy as np

# Sample counts along the curve; export oversamples for large photos
PREVIEW_SAMPLES = 3500
EXPORT_SAMPLES = 6000


class ScanlineMap:
    """
    Per-row lookup from row index to the x position where the curve crosses it.

    Each of the height entries is either valid with an integer x or invalid
    (the curve never reaches that row). Stored as two parallel arrays.
    """

    def __init__(self, xs, valid):
        """
        Initialize the map.

        Args:
            xs: Integer x position per row (ignored where not valid)
            valid: Boolean flag per row
        """
        self.xs = np.asarray(xs, dtype=np.int64).copy()
        self.valid = np.asarray(valid, dtype=bool).copy()
        if self.xs.shape != self.valid.shape or self.xs.ndim != 1:
            raise ValueError("xs and valid must be 1-D arrays of equal length")

    @classmethod
    def empty(cls, height):
        """Create a map with every row invalid"""
        return cls(np.zeros(height, dtype=np.int64), np.zeros(height, dtype=bool))

    @property
    def height(self):
        return len(self.xs)

    def __len__(self):
        return len(self.xs)

    def __getitem__(self, y):
        """Get the x position for row y, or None if the row is invalid"""
        if not self.valid[y]:
            return None
        return int(self.xs[y])

    def __iter__(self):
        for y in range(len(self)):
            yield self[y]

    def __eq__(self, other):
        if not isinstance(other, ScanlineMap):
            return NotImplemented
        return (np.array_equal(self.valid, other.valid) and
                np.array_equal(self.xs[self.valid], other.xs[other.valid]))

    def __repr__(self):
        return f"ScanlineMap(height={self.height}, valid={self.valid_count()})"

    def set(self, y, x):
        """Mark row y valid at position x"""
        self.xs[y] = int(x)
        self.valid[y] = True

    def valid_count(self):
        """Number of rows with a sample position"""
        return int(np.count_nonzero(self.valid))

    def valid_rows(self):
        """Indices of the valid rows, ascending"""
        return np.flatnonzero(self.valid)

    def fill_gaps(self):
        """
        Bridge single-row holes in one pass.

        An invalid row whose two neighbours are valid takes the floor of the
        neighbours' mean x. Wider holes are not closed, and filled rows do
        not feed further filling. Operates in place and returns self.
        """
        if self.height < 3:
            return self

        above = self.valid[:-2]
        below = self.valid[2:]
        holes = ~self.valid[1:-1] & above & below

        # Floor division keeps the floor semantics for negative positions
        bridged = (self.xs[:-2] + self.xs[2:]) // 2

        inner_xs = self.xs[1:-1]
        inner_valid = self.valid[1:-1]
        inner_xs[holes] = bridged[holes]
        inner_valid[holes] = True
        return self


def build(curve, height, sample_count=PREVIEW_SAMPLES):
    """
    Build the scanline map for a curve on a raster of the given height.

    The curve is sampled at sample_count + 1 uniform parameter values (both
    end points included). Each sample lands in row floor(y); within a row the
    sample closest to the row's integer line wins, the earlier one on a tie.
    A single gap-fill pass then bridges one-row holes.

    Args:
        curve: CurveModel in the raster's coordinate space
        height: Raster height in rows
        sample_count: Number of parameter intervals

    Returns:
        ScanlineMap with exactly height entries
    """
    if height < 0:
        raise ValueError("Height must not be negative")
    if sample_count < 1:
        raise ValueError("Sample count must be at least 1")

    scanline_map = ScanlineMap.empty(height)
    if height == 0:
        return scanline_map

    t = np.arange(sample_count + 1, dtype=np.float64) / sample_count
    x, y = curve.evaluate(t)

    rows = np.floor(y)
    inside = (rows >= 0) & (rows < height)
    if not np.any(inside):
        return scanline_map

    sample_index = np.flatnonzero(inside)
    rows = rows[inside].astype(np.int64)
    dist = np.abs(y[inside] - rows)
    cols = np.floor(x[inside]).astype(np.int64)

    # Sort by row, then distance, then sample order: the first entry of each
    # row is the sample a strict "closer than best so far" scan would keep
    order = np.lexsort((sample_index, dist, rows))
    rows = rows[order]
    cols = cols[order]
    _, first = np.unique(rows, return_index=True)

    scanline_map.xs[rows[first]] = cols[first]
    scanline_map.valid[rows[first]] = True

    return scanline_map.fill_gaps()
