# -- Runner and Export Tests -- #

'''
Headless run loop with periodic injection and the JSON frame export.
'''

import json
import os

import numpy as np

from particleFluids.FluidSim.export.frameExporter import FrameExporter
from particleFluids.FluidSim.runner import FluidSimRunner, buildParser, main
from particleFluids.FluidSim.sph.particles import Particle
from particleFluids.FluidSim.sph.protocols import SimulationParameters
from particleFluids.FluidSim.sph.simulation import Simulation
from particleFluids.FluidSim.sph.vector2 import Vector2


def smallParams(count=30):
    params = SimulationParameters.small()
    params.targetParticleCount = count
    return params


def testRunWithInjectionAndExport(tmp_path):
    runner = FluidSimRunner()
    result = runner.runDamBreak(
        smallParams(),
        nSteps=4,
        injectEvery=2,
        seed=0,
        exportEvery=2,
        exportDir=str(tmp_path),
        verbose=False,
    )

    assert result['nInjected'] == 60
    assert len(result['simulation'].particles) == 90
    assert result['finalState'].step == 4
    assert result['nFrames'] == 3

    path = result['exportPath']
    assert os.path.exists(path)
    with open(path) as f:
        data = json.load(f)

    assert data['meta']['type'] == 'fluidSim'
    assert data['meta']['nFrames'] == 3
    assert data['parameters']['targetParticleCount'] == 30
    assert [frame['step'] for frame in data['frames']] == [0, 2, 4]
    assert len(data['frames'][0]['positions']) == 30
    assert len(data['frames'][-1]['positions']) == 90
    assert data['frames'][0]['radius'] == 5.0
    assert data['history']['steps'] == [0, 2, 4]


def testRunWithoutExport():
    result = FluidSimRunner().runDamBreak(
        smallParams(), nSteps=2, seed=1, doExport=False, verbose=False
    )
    assert result['exportPath'] is None
    assert result['nInjected'] == 0


def testExporterSkipsDivergedParticles(tmp_path):
    params = smallParams()
    sim = Simulation(
        params,
        [Particle(position=Vector2(100.0, 100.0)), Particle(position=Vector2(np.nan, 10.0))],
    )
    state = sim.step()

    exporter = FrameExporter()
    exporter.addFrame(state, sim)
    frame = exporter.frames[0]

    assert len(frame['positions']) == 1
    assert exporter.history['nDiverged'] == [1]

    path = exporter.export(params, outputDir=str(tmp_path), scenarioName='test')
    assert os.path.basename(path).startswith('fluidSim_test_')


def testParserDefaults():
    args = buildParser().parse_args([])
    assert args.preset == 'small'
    assert args.steps == 200
    assert args.inject_every == 0
    assert args.no_export is False
    assert args.prune_diverged is False


def testMainPrintsSummary(capsys):
    main(['--steps', '2', '--seed', '0', '--no-export'])
    out = capsys.readouterr().out

    assert 'FLUIDSIM -- SPH DAM-BREAK SIMULATION' in out
    assert 'SIMULATION SUMMARY' in out


def testExportWritesNonFiniteValuesAsNull(tmp_path):
    params = smallParams()
    sim = Simulation(
        params,
        [Particle(position=Vector2(100.0, 100.0), velocity=Vector2(np.inf, 0.0))],
    )

    exporter = FrameExporter()
    exporter.addFrame(sim.currentState, sim)
    path = exporter.export(params, outputDir=str(tmp_path))

    with open(path) as f:
        text = f.read()
    assert 'Infinity' not in text and 'NaN' not in text

    data = json.loads(text)
    frame = data['frames'][0]
    assert frame['positions'] == [[100.0, 100.0]]
    assert frame['velocityMagnitudes'] == [None]
    assert data['history']['kinetic'] == [None]
