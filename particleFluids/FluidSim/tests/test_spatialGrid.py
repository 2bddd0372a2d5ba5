# -- Spatial Grid Tests -- #

'''
Bucket placement, neighbor index arithmetic and neighbor coverage of
the row-major grid.
'''

import math
import warnings

import numpy as np
import pytest

from particleFluids.FluidSim.sph.particles import Particle
from particleFluids.FluidSim.sph.spatialGrid import SpatialGrid
from particleFluids.FluidSim.sph.vector2 import Vector2


def makeParticles(points):
    return [Particle(position=Vector2(x, y)) for x, y in points]


######################################################################
# -- Neighbor Index Enumeration -- #
######################################################################

# 4 rows (along x) by 3 columns (along y); index = row * 3 + col
#
#   row 0:  0  1  2
#   row 1:  3  4  5
#   row 2:  6  7  8
#   row 3:  9 10 11
@pytest.mark.parametrize('cellIndex, expected', [
    # Corners
    (0, {0, 1, 3, 4}),
    (2, {1, 2, 4, 5}),
    (9, {6, 7, 9, 10}),
    (11, {7, 8, 10, 11}),
    # Edges
    (1, {0, 1, 2, 3, 4, 5}),
    (3, {0, 1, 3, 4, 6, 7}),
    (5, {1, 2, 4, 5, 7, 8}),
    (8, {4, 5, 7, 8, 10, 11}),
    (10, {6, 7, 8, 9, 10, 11}),
    # Interior
    (4, {0, 1, 2, 3, 4, 5, 6, 7, 8}),
    (7, {3, 4, 5, 6, 7, 8, 9, 10, 11}),
])
def testNeighborCellIndices(cellIndex, expected):
    grid = SpatialGrid(domainWidth=128.0, domainHeight=96.0, cellSize=32.0)
    assert (grid.numRows, grid.numCols) == (4, 3)

    indices = grid.neighborCellIndices(cellIndex)
    assert indices[0] == cellIndex
    assert len(indices) == len(expected)
    assert set(indices) == expected


def testNeighborsNeverWrapAcrossRows():
    grid = SpatialGrid(domainWidth=128.0, domainHeight=96.0, cellSize=32.0)

    # Last column of row 0 and first column of row 1 are flat neighbors
    # (2 and 3) but far apart in space
    assert 3 not in grid.neighborCellIndices(2)
    assert 2 not in grid.neighborCellIndices(3)


def testRowColRoundTrip():
    grid = SpatialGrid(domainWidth=128.0, domainHeight=96.0, cellSize=32.0)
    for index in range(grid.nCells):
        row, col = grid.rowCol(index)
        assert grid.cellIndex(row, col) == index


######################################################################
# -- Rebuild -- #
######################################################################

def testRebuildPlacesParticlesInRowMajorCells():
    particles = makeParticles([(10.0, 10.0), (40.0, 10.0), (10.0, 70.0), (100.0, 90.0)])
    grid = SpatialGrid(128.0, 96.0, 32.0)
    grid.rebuild(particles, 128.0, 96.0, 32.0)

    # index = floor(x / 32) * numCols + floor(y / 32)
    assert grid.bucket(0) == [0]
    assert grid.bucket(3) == [1]
    assert grid.bucket(2) == [2]
    assert grid.bucket(3 * 3 + 2) == [3]
    assert grid.cellIndexOf(particles[3].position) == 11


def testRebuildCompletenessWithNonFinitePositions():
    particles = makeParticles([
        (10.0, 10.0),
        (math.nan, 20.0),
        (50.0, 60.0),
        (30.0, math.inf),
        (-math.inf, math.nan),
        (120.0, 5.0),
    ])
    grid = SpatialGrid(128.0, 96.0, 32.0)
    grid.rebuild(particles, 128.0, 96.0, 32.0)

    nFinite = sum(1 for p in particles if p.hasFinitePosition())
    assert grid.particleCount == nFinite == 3
    assert grid.droppedIndices == [1, 3, 4]

    placed = grid.activeIndices()
    for dropped in grid.droppedIndices:
        assert dropped not in placed
    assert sorted(placed) == [0, 2, 5]


def testRebuildClearsPreviousContents():
    particles = makeParticles([(10.0, 10.0), (50.0, 50.0)])
    grid = SpatialGrid(128.0, 96.0, 32.0)
    grid.rebuild(particles, 128.0, 96.0, 32.0)

    particles[0].position = Vector2(100.0, 80.0)
    grid.rebuild(particles, 128.0, 96.0, 32.0)

    assert grid.particleCount == 2
    assert grid.bucket(0) == []
    assert 0 in grid.bucket(grid.cellIndexOf(Vector2(100.0, 80.0)))


def testRebuildResizesForNewDomain():
    grid = SpatialGrid(128.0, 96.0, 32.0)
    grid.rebuild([], 200.0, 100.0, 20.0)
    assert (grid.numRows, grid.numCols) == (10, 5)
    assert grid.nCells == 50
    assert grid.particleCount == 0


def testOutOfDomainFinitePositionsClampToEdgeCells():
    particles = makeParticles([(-5.0, 200.0), (500.0, -1.0)])
    grid = SpatialGrid(128.0, 96.0, 32.0)
    grid.rebuild(particles, 128.0, 96.0, 32.0)

    assert grid.particleCount == 2
    assert grid.bucket(grid.cellIndex(0, 2)) == [0]
    assert grid.bucket(grid.cellIndex(3, 0)) == [1]


def testHugeFiniteCoordinatesClampToNearestEdge():
    particles = makeParticles([(1e30, 10.0), (10.0, -1e30), (-1e300, 1e300)])
    grid = SpatialGrid(128.0, 96.0, 32.0)

    with warnings.catch_warnings():
        warnings.simplefilter('error')
        grid.rebuild(particles, 128.0, 96.0, 32.0)

    assert grid.droppedIndices == []
    assert grid.bucket(grid.cellIndex(grid.numRows - 1, 0)) == [0]
    assert grid.bucket(grid.cellIndex(0, 0)) == [1]
    assert grid.bucket(grid.cellIndex(0, grid.numCols - 1)) == [2]


######################################################################
# -- Neighbor Coverage -- #
######################################################################

def neighborSet(grid, particles, i):
    cell = grid.cellIndexOf(particles[i].position)
    return {j for bucket in grid.neighborsOf(cell) for j in bucket}


def testNeighborCoverageForRandomParticles():
    h = 16.0
    width, height = 600.0, 400.0
    rng = np.random.default_rng(7)
    points = rng.random((400, 2)) * [width, height]
    particles = makeParticles(points.tolist())

    grid = SpatialGrid(width, height, 2.0 * h)
    grid.rebuild(particles, width, height, 2.0 * h)

    diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
    dist = np.sqrt(np.sum(diff * diff, axis=2))
    iIdx, jIdx = np.where(dist < 2.0 * h)

    for i, j in zip(iIdx.tolist(), jIdx.tolist()):
        assert j in neighborSet(grid, particles, i)


def testNeighborCoverageAcrossRowBoundaryAndCellZero():
    width, height = 600.0, 400.0
    cell = 32.0
    particles = makeParticles([
        (31.9, 399.0),   # row 0, last column
        (32.1, 399.0),   # row 1, last column
        (1.0, 1.0),      # cell 0
        (5.0, 5.0),      # cell 0
        (1.0, 33.0),     # cell 1
    ])
    grid = SpatialGrid(width, height, cell)
    grid.rebuild(particles, width, height, cell)

    assert 1 in neighborSet(grid, particles, 0)
    assert 0 in neighborSet(grid, particles, 1)
    assert {2, 3, 4} <= neighborSet(grid, particles, 2)
    assert {2, 3} <= neighborSet(grid, particles, 4)
