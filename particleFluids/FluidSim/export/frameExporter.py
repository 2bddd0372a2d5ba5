# -- Simulation Frame Exporter -- #

'''
Exports SPH simulation frames as JSON for an external renderer.

Collects particle snapshots during a run and writes them to a single
JSON file. A renderer needs only each particle's position and the
shared disc radius; densities and speeds are included for colouring.

Only active particles (those placed in the grid at the last rebuild)
are written, so diverged particles with nan positions never reach
the file. Any other non-finite value is written as null, keeping the
output strict JSON.
'''

from __future__ import annotations

import json
import math
import os
from datetime import datetime

import numpy as np

from particleFluids.FluidSim.sph.particles import densitiesArray, positionsArray, velocitiesArray
from particleFluids.FluidSim.sph.protocols import SimulationParameters, SimulationState
from particleFluids.FluidSim.sph.simulation import Simulation


def finiteList(values: np.ndarray, decimals: int) -> list:
    '''
    Rounded nested list with non-finite entries replaced by None.

    Parameters:
    -----------
    values : np.ndarray
        Values to convert
    decimals : int
        Decimal places kept

    Returns:
    --------
    list : JSON-safe nested list (nan and inf become null)
    '''
    rounded = np.round(values, decimals).astype(object)
    rounded[~np.isfinite(values)] = None
    return rounded.tolist()


def finiteScalar(value: float) -> float | None:
    value = float(value)
    return value if math.isfinite(value) else None


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Usage:
        exporter = FrameExporter()
        # During simulation loop:
        exporter.addFrame(state, simulation)
        # After simulation:
        exporter.export(params, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "fluidSim", "nFrames": 51, "created": "...", ... },
        "parameters": { "kernelRadius": 16.0, ... },
        "frames": [
            {
                "step": 0,
                "time": 0.0,
                "radius": 5.0,
                "positions": [[x0, y0], [x1, y1], ...],
                "velocityMagnitudes": [v0, v1, ...],
                "densities": [rho0, rho1, ...]
            },
            ...
        ],
        "history": {
            "steps": [...],
            "nParticles": [...],
            "nDiverged": [...],
            "kinetic": [...],
            "maxDensity": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._history: dict[str, list] = {
            'steps': [],
            'nParticles': [],
            'nDiverged': [],
            'kinetic': [],
            'maxDensity': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        return self._frames

    @property
    def history(self) -> dict[str, list]:
        '''Per-frame diagnostic series.'''
        return self._history

    def addFrame(self, state: SimulationState, simulation: Simulation) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Current simulation state diagnostics
        simulation : Simulation
            Simulation whose active particles are recorded
        '''
        particles = simulation.particles
        active = simulation.activeIndices

        positions = positionsArray(particles, active)
        velMagnitudes = np.linalg.norm(velocitiesArray(particles, active), axis=1)
        densities = densitiesArray(particles, active)

        frame = {
            'step': state.step,
            'time': round(state.time, 6),
            'radius': simulation.parameters.particleRadius,
            'positions': finiteList(positions, 3),
            'velocityMagnitudes': finiteList(velMagnitudes, 3),
            'densities': finiteList(densities, 6),
        }
        self._frames.append(frame)

        self._history['steps'].append(state.step)
        self._history['nParticles'].append(state.nParticles)
        self._history['nDiverged'].append(state.nDiverged)
        self._history['kinetic'].append(finiteScalar(state.kineticEnergy))
        self._history['maxDensity'].append(finiteScalar(state.maxDensity))

    def export(
        self,
        params: SimulationParameters,
        outputDir: str = 'output',
        scenarioName: str = 'damBreak',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        params : SimulationParameters
            Simulation parameters for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'fluidSim_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        output = {
            'meta': {
                'type': 'fluidSim',
                'scenario': scenarioName,
                'nFrames': len(self._frames),
                'domain': [params.domainWidth, params.domainHeight],
                'created': datetime.now().isoformat(),
            },
            'parameters': params.toDict(),
            'frames': self._frames,
            'history': self._history,
        }

        with open(filepath, 'w') as f:
            json.dump(output, f, indent=None, separators=(',', ':'), allow_nan=False)

        return filepath
