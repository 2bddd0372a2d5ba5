# -- Uniform Bucket Grid for Neighbor Search -- #

'''
Uniform grid partitioning particles into buckets for neighbor lookup.

The domain is divided into square cells of size 2h, so every particle
within the kernel radius (and within the 2h cohesion range) of a
particle lies in that particle's cell or one of the 8 surrounding
cells.

Cell addressing is row-major over a flat list of buckets:

    row   = floor(x / cellSize)       0 <= row < numRows  (along x)
    col   = floor(y / cellSize)       0 <= col < numCols  (along y)
    index = row * numCols + col

Neighbor cells are found by stepping (row, col) by -1/0/+1 and
rejecting offsets that leave the grid, then flattening with the same
formula. Stepping the flat index by +-1 directly would wrap from the
last column of one row into the first column of the next.

Buckets hold integer indices into the simulation's particle list,
never the particles themselves.

References:
-----------
Green (2010) -- Particle Simulation using CUDA
'''

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from particleFluids.FluidSim.sph.particles import Particle, positionsArray
from particleFluids.FluidSim.sph.vector2 import Vector2


# Moore neighborhood offsets (self first)
neighborOffsets: tuple[tuple[int, int], ...] = (
    (0, 0),
    (0, 1), (0, -1),
    (-1, 0), (-1, 1), (-1, -1),
    (1, 0), (1, 1), (1, -1),
)


class SpatialGrid:
    '''
    Flat row-major grid of particle-index buckets.

    The grid is rebuilt from scratch every step. Particles with a nan
    or infinite coordinate are left out of every bucket and listed in
    droppedIndices. Finite positions outside the domain are clamped
    into the nearest edge cell.

    Parameters:
    -----------
    domainWidth : float
        Domain extent along x
    domainHeight : float
        Domain extent along y
    cellSize : float
        Cell edge length (2 * kernel radius)
    '''

    def __init__(self, domainWidth: float, domainHeight: float, cellSize: float) -> None:
        self._numRows = 0
        self._numCols = 0
        self._cellSize = cellSize
        self._buckets: list[list[int]] = []
        self._droppedIndices: list[int] = []
        self._resize(domainWidth, domainHeight, cellSize)

    ######################################################################
    # -- Building -- #
    ######################################################################

    def rebuild(
        self,
        particles: Sequence[Particle],
        domainWidth: float,
        domainHeight: float,
        cellSize: float,
    ) -> None:
        '''
        Clear every bucket and reinsert all particles.

        Cell indices are computed for all particles at once; rows with
        a non-finite coordinate are skipped and recorded as dropped.

        Parameters:
        -----------
        particles : Sequence[Particle]
            Particle store; buckets receive indices into it
        domainWidth : float
            Domain extent along x
        domainHeight : float
            Domain extent along y
        cellSize : float
            Cell edge length
        '''
        self._resize(domainWidth, domainHeight, cellSize)
        self._droppedIndices = []

        positions = positionsArray(particles)
        if len(positions) == 0:
            return

        finite = np.all(np.isfinite(positions), axis=1)
        self._droppedIndices = np.flatnonzero(~finite).tolist()

        finiteIndices = np.flatnonzero(finite)
        # Clip before the integer cast so huge coordinates cannot overflow
        cells = np.floor(positions[finiteIndices] / cellSize)
        rows = np.clip(cells[:, 0], 0, self._numRows - 1).astype(np.int64)
        cols = np.clip(cells[:, 1], 0, self._numCols - 1).astype(np.int64)
        flatIndices = rows * self._numCols + cols

        for particleIndex, cellIndex in zip(finiteIndices.tolist(), flatIndices.tolist()):
            self._buckets[cellIndex].append(particleIndex)

    def _resize(self, domainWidth: float, domainHeight: float, cellSize: float) -> None:
        '''Reallocate empty buckets for the given domain and cell size.'''
        self._cellSize = cellSize
        self._numRows = max(1, math.ceil(domainWidth / cellSize))
        self._numCols = max(1, math.ceil(domainHeight / cellSize))
        self._buckets = [[] for _ in range(self._numRows * self._numCols)]

    ######################################################################
    # -- Index Arithmetic -- #
    ######################################################################

    def cellIndex(self, row: int, col: int) -> int:
        '''Flat index of cell (row, col).'''
        return row * self._numCols + col

    def rowCol(self, cellIndex: int) -> tuple[int, int]:
        '''Inverse of cellIndex.'''
        return divmod(cellIndex, self._numCols)

    def cellIndexOf(self, position: Vector2) -> int:
        '''
        Flat index of the cell containing a finite position.

        Positions outside the domain map to the nearest edge cell.
        '''
        row = min(max(math.floor(position.x / self._cellSize), 0), self._numRows - 1)
        col = min(max(math.floor(position.y / self._cellSize), 0), self._numCols - 1)
        return self.cellIndex(row, col)

    def neighborCellIndices(self, cellIndex: int) -> list[int]:
        '''
        Flat indices of the Moore neighborhood of a cell.

        Parameters:
        -----------
        cellIndex : int
            Flat index of the center cell

        Returns:
        --------
        list[int] : The cell itself followed by its in-grid neighbors
            (4 at a corner, 6 on an edge, 9 in the interior)
        '''
        row, col = self.rowCol(cellIndex)
        indices = []
        for dRow, dCol in neighborOffsets:
            r = row + dRow
            c = col + dCol
            if 0 <= r < self._numRows and 0 <= c < self._numCols:
                indices.append(self.cellIndex(r, c))
        return indices

    def neighborsOf(self, cellIndex: int) -> list[list[int]]:
        '''Buckets of the Moore neighborhood of a cell (self included).'''
        return [self._buckets[i] for i in self.neighborCellIndices(cellIndex)]

    ######################################################################
    # -- Queries -- #
    ######################################################################

    def bucket(self, cellIndex: int) -> list[int]:
        return self._buckets[cellIndex]

    def nonEmptyCells(self) -> list[int]:
        '''Flat indices of cells holding at least one particle, ascending.'''
        return [i for i, bucket in enumerate(self._buckets) if bucket]

    def activeIndices(self) -> list[int]:
        '''Particle indices placed in the grid, in bucket order.'''
        return [i for bucket in self._buckets for i in bucket]

    @property
    def numRows(self) -> int:
        '''Number of cells along x.'''
        return self._numRows

    @property
    def numCols(self) -> int:
        '''Number of cells along y.'''
        return self._numCols

    @property
    def nCells(self) -> int:
        return len(self._buckets)

    @property
    def cellSize(self) -> float:
        return self._cellSize

    @property
    def particleCount(self) -> int:
        '''Total number of particle indices across all buckets.'''
        return sum(len(bucket) for bucket in self._buckets)

    @property
    def droppedIndices(self) -> list[int]:
        '''Indices of particles left out of the last rebuild (non-finite).'''
        return list(self._droppedIndices)
