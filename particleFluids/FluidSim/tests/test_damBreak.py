# -- Dam-Break Scenario Tests -- #

'''
Lattice layout, target-count bound, jitter and mid-run injection of
the dam-break scenario.
'''

import numpy as np
import pytest

from particleFluids.FluidSim.scenarios.damBreak import (
    DamBreakLayout,
    createDamBreak,
    createDamBreakSimulation,
    damBreakPositions,
    injectDamBreak,
)
from particleFluids.FluidSim.sph.protocols import SimulationParameters


def testSeedingStopsAtTargetCount():
    params = SimulationParameters.small()
    params.targetParticleCount = 50

    particles = createDamBreak(params, rng=np.random.default_rng(0))
    assert len(particles) == 50


def testSeedingBoundedByLatticeWhenTargetIsLarge():
    params = SimulationParameters.small()
    params.targetParticleCount = 10 ** 6

    slots = damBreakPositions(params, DamBreakLayout.initial())
    particles = createDamBreak(params, rng=np.random.default_rng(0))

    # 600 x 400 domain, h = 16: 14 columns from x = 200, 24 rows from y = 60
    assert len(slots) == 14 * 24
    assert len(particles) == len(slots) < params.targetParticleCount


def testLatticeFillsRowByRowWithInclusiveRightEdge():
    params = SimulationParameters(domainWidth=864.0, domainHeight=400.0)
    slots = damBreakPositions(params, DamBreakLayout.initial())

    xs = np.unique(np.round(slots[:, 0], 6))
    ys = np.unique(np.round(slots[:, 1], 6))

    # 864 * 2/6 = 288 to 864 * 4/6 = 576 in steps of 14.4
    assert len(xs) == 21
    assert xs[0] == pytest.approx(288.0)
    assert xs[-1] == pytest.approx(576.0)
    assert ys[0] == pytest.approx(60.0)
    assert np.all(ys < params.domainHeight)

    # First row complete before the second begins
    assert np.all(slots[:21, 1] == slots[0, 1])
    assert slots[21, 1] == pytest.approx(60.0 + 0.9 * params.kernelRadius)


def testJitterIsHorizontalAndBounded():
    params = SimulationParameters.small()
    slots = damBreakPositions(params, DamBreakLayout.initial())[:params.targetParticleCount]
    particles = createDamBreak(params, rng=np.random.default_rng(3))

    positions = np.array([[p.position.x, p.position.y] for p in particles])
    dx = positions[:, 0] - slots[:, 0]

    assert np.all(dx >= -0.5) and np.all(dx <= 0.5)
    np.testing.assert_array_equal(positions[:, 1], slots[:, 1])
    assert all(p.velocity.len2() == 0.0 for p in particles)


def testSeededLayoutIsReproducible():
    params = SimulationParameters.small()
    first = createDamBreak(params, rng=np.random.default_rng(42))
    second = createDamBreak(params, rng=np.random.default_rng(42))

    assert [p.position for p in first] == [p.position for p in second]


def testInjectionLayoutUsesWiderRows():
    params = SimulationParameters.small()
    slots = damBreakPositions(params, DamBreakLayout.injection())
    ys = np.unique(np.round(slots[:, 1], 6))

    assert ys[1] - ys[0] == pytest.approx(0.95 * params.kernelRadius)


def testInjectionAppendsBatchWithoutResettingParticles():
    params = SimulationParameters.small()
    params.targetParticleCount = 40
    sim = createDamBreakSimulation(params, np.random.default_rng(1))
    sim.step()

    before = [(p.position.x, p.position.y, p.velocity.x, p.velocity.y) for p in sim.particles]

    added = injectDamBreak(sim, np.random.default_rng(2))

    assert added == 40
    assert len(sim.particles) == 80
    after = [(p.position.x, p.position.y, p.velocity.x, p.velocity.y) for p in sim.particles[:40]]
    assert after == before
    assert sim.grid.particleCount == 80


def testDamBreakSimulationStaysFiniteAndInBounds():
    params = SimulationParameters.small()
    params.targetParticleCount = 60
    sim = createDamBreakSimulation(params, np.random.default_rng(5))

    for _ in range(3):
        state = sim.step()

    assert state.nDiverged == 0
    assert state.nActive == 60
    for p in sim.particles:
        assert p.hasFinitePosition()
        assert 0.0 <= p.position.x <= params.domainWidth - params.particleRadius
        assert 0.0 <= p.position.y <= params.domainHeight - params.particleRadius
