# -- Fluid Simulation Runner -- #

'''
Command-line entry point for running the SPH dam-break simulation.

Stands in for an interactive host: advances the simulation a fixed
number of steps, optionally injects a fresh dam-break batch at a
regular step interval (as a keypress would), prints progress, and
optionally exports frame data for an external renderer.

Usage:
    fluidsim                                   # Small dam break, 200 steps
    fluidsim --preset reference --steps 1000   # Reference 1000-particle dam break
    fluidsim --inject-every 250                # Add a batch every 250 steps
    fluidsim --config configs/damBreak.json
    fluidsim --no-export                       # Skip frame export
'''

from __future__ import annotations

import argparse
import time as timeModule

import numpy as np

from particleFluids.FluidSim.sph.protocols import SimulationParameters, SimulationState
from particleFluids.FluidSim.scenarios.damBreak import createDamBreakSimulation, injectDamBreak
from particleFluids.FluidSim.export.frameExporter import FrameExporter


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='FluidSim -- 2D SPH dam-break simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file (overrides --preset)',
    )
    parser.add_argument(
        '--preset', type=str, default='small',
        choices=['small', 'reference'],
        help='Parameter preset (default: small)',
    )
    parser.add_argument(
        '--steps', type=int, default=200,
        help='Number of steps to run (default: 200)',
    )
    parser.add_argument(
        '--inject-every', type=int, default=0,
        help='Inject a dam-break batch every N steps (default: 0, never)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Seed for the layout jitter (default: random)',
    )
    parser.add_argument(
        '--export-every', type=int, default=10,
        help='Record a frame every N steps (default: 10)',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--output-dir', type=str, default='particleFluids/FluidSim/output',
        help='Output directory for exported frames (default: FluidSim/output)',
    )
    parser.add_argument(
        '--prune-diverged', action='store_true',
        help='Remove particles with non-finite positions instead of keeping them inert',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class FluidSimRunner:
    '''
    Runs a dam-break simulation and stores results.

    Handles the full pipeline: scenario setup, the step loop with
    periodic injection and progress reporting, and optional frame
    export.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        return self._exporter

    def runDamBreak(
        self,
        params: SimulationParameters,
        nSteps: int = 200,
        injectEvery: int = 0,
        seed: int | None = None,
        exportEvery: int = 10,
        doExport: bool = True,
        exportDir: str = 'particleFluids/FluidSim/output',
        verbose: bool = True,
    ) -> dict:
        '''
        Run a dam-break simulation.

        Parameters:
        -----------
        params : SimulationParameters
            Simulation parameters
        nSteps : int
            Number of steps to advance
        injectEvery : int
            Inject a new batch every N steps (0 disables injection)
        seed : int | None
            Seed for the layout jitter
        exportEvery : int
            Record a frame every N steps
        doExport : bool
            Whether to write the collected frames to disk
        exportDir : str
            Output directory for frame export
        verbose : bool
            Print setup, progress and summary sections

        Returns:
        --------
        dict : Simulation results summary
        '''
        echo = print if verbose else (lambda *args, **kwargs: None)

        echo()
        echo('=' * 62)
        echo('  FLUIDSIM -- SPH DAM-BREAK SIMULATION')
        echo('=' * 62)
        echo()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        echo('-' * 62)
        echo('  SCENARIO SETUP')
        echo('-' * 62)

        rng = np.random.default_rng(seed)
        simulation = createDamBreakSimulation(params, rng)

        echo(f'  Domain:            {params.domainWidth:8.1f} x {params.domainHeight:.1f} px')
        echo(f'  Kernel Radius:     {params.kernelRadius:8.2f} px')
        echo(f'  Grid:              {simulation.grid.numRows:8d} x {simulation.grid.numCols} cells')
        echo(f'  Time Step:         {params.timeStep:8.2e}')
        echo(f'  Particles:         {len(simulation.particles):8d}')
        echo(f'  Steps:             {nSteps:8d}')
        if injectEvery > 0:
            echo(f'  Inject Every:      {injectEvery:8d} steps')
        echo()

        # Record initial frame
        self._exporter.addFrame(simulation.currentState, simulation)

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        echo('-' * 62)
        echo('  RUNNING SIMULATION')
        echo('-' * 62)
        echo()
        echo(f'  {"Step":>8}  {"Time":>8}  {"Particles":>9}  {"Diverged":>8}  {"MaxVel":>10}  {"MaxDens":>10}')
        echo('  ' + '-' * 62)

        wallClockStart = timeModule.time()
        printInterval = max(1, nSteps // 20)
        nInjected = 0
        state: SimulationState = simulation.currentState

        for stepIndex in range(1, nSteps + 1):
            state = simulation.step()

            if injectEvery > 0 and stepIndex % injectEvery == 0:
                nInjected += injectDamBreak(simulation, rng)

            if exportEvery > 0 and stepIndex % exportEvery == 0:
                self._exporter.addFrame(state, simulation)

            if stepIndex % printInterval == 0 or stepIndex == nSteps:
                echo(
                    f'  {state.step:8d}  {state.time:8.4f}  {state.nParticles:9d}  '
                    f'{state.nDiverged:8d}  {state.maxVelocity:10.2f}  {state.maxDensity:10.5f}'
                )

        wallClockSeconds = timeModule.time() - wallClockStart

        echo()
        echo(f'  Simulation complete.')
        echo(f'  Total steps:       {state.step:8d}')
        echo(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        echo(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        echo()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            echo('-' * 62)
            echo('  EXPORTING FRAME DATA')
            echo('-' * 62)

            exportPath = self._exporter.export(
                params=params,
                outputDir=exportDir,
                scenarioName='damBreak',
            )
            echo(f'  Exported to: {exportPath}')
            echo()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        echo('=' * 62)
        echo('  SIMULATION SUMMARY')
        echo('=' * 62)
        echo(f'  Particles:         {state.nParticles:8d}')
        echo(f'  Injected:          {nInjected:8d}')
        echo(f'  Diverged:          {state.nDiverged:8d}')
        echo(f'  Final KE:          {state.kineticEnergy:12.4e}')
        echo(f'  Mean Density:      {state.meanDensity:12.6f}')
        echo(f'  Max Velocity:      {state.maxVelocity:12.4f}')
        echo('=' * 62)
        echo()

        return {
            'finalState': state,
            'simulation': simulation,
            'nInjected': nInjected,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
        }


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    if args.config:
        try:
            params = SimulationParameters.fromJson(args.config)
        except (OSError, ValueError) as exc:
            parser.error(f'could not load {args.config}: {exc}')
    else:
        presets = {
            'small': SimulationParameters.small,
            'reference': SimulationParameters.reference,
        }
        params = presets[args.preset]()

    if args.prune_diverged:
        params.pruneDiverged = True

    runner = FluidSimRunner()
    runner.runDamBreak(
        params,
        nSteps=args.steps,
        injectEvery=args.inject_every,
        seed=args.seed,
        exportEvery=args.export_every,
        doExport=not args.no_export,
        exportDir=args.output_dir,
    )


if __name__ == '__main__':
    main()
