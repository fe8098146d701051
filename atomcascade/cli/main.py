"""
Main CLI entry point for AtomCascade.
"""

import argparse
import sys
from pathlib import Path

from atomcascade import __version__
from atomcascade.core.logging_config import LOG_LEVELS, setup_logging, get_logger

logger = get_logger("cli.main")


def _structure_solver(config, config_path: Path):
    """Tabulated structure solver from a 'levels_table' file or a 'multiplets' section."""
    from atomcascade.atomic.tabulated import TabulatedStructureSolver

    table = config.get("levels_table")
    if table is not None:
        table_path = Path(table)
        if not table_path.is_absolute():
            table_path = config_path.parent / table_path
        return TabulatedStructureSolver.from_file(table_path)
    return TabulatedStructureSolver.from_config(config)


def configurations_cmd(args):
    """Configuration generation command."""
    from atomcascade.cascade.blocks import CascadeComputation
    from atomcascade.cascade.configurations import (
        generate_configuration_list,
        group_configurations,
    )
    from atomcascade.core.config import load_config

    logger.info(f"Loading configuration from {args.config}")
    config = load_config(args.config)
    computation = CascadeComputation.from_config(config)

    confs = generate_configuration_list(
        computation.initial_confs,
        computation.max_electron_loss,
        computation.n_shake_displacements,
    )

    print(f"Configurations used in the cascade '{computation.name}':")
    for n_electrons, group in group_configurations(confs).items():
        print(f"\n  Configuration(s) with {n_electrons} electrons:")
        for conf in group:
            print(f"    {conf}")


def steps_cmd(args):
    """Block and step determination command."""
    from atomcascade.cascade.blocks import CascadeComputation, determine_blocks, determine_steps
    from atomcascade.cascade.configurations import generate_configuration_list
    from atomcascade.core.config import load_config
    from atomcascade.io.reports import blocks_to_dataframe, export_csv, steps_to_dataframe

    config_path = Path(args.config)
    logger.info(f"Loading configuration from {config_path}")
    config = load_config(config_path)
    computation = CascadeComputation.from_config(config)
    solver = _structure_solver(config, config_path)

    confs = generate_configuration_list(
        computation.initial_confs,
        computation.max_electron_loss,
        computation.n_shake_displacements,
    )
    blocks = determine_blocks(computation, confs, solver)
    steps = determine_steps(computation, blocks)

    print("Configuration blocks:")
    print(blocks_to_dataframe(blocks).to_string(index=False))
    print(f"\nSteps of the cascade ({len(steps)}):")
    steps_df = steps_to_dataframe(steps)
    if len(steps_df) > 0:
        print(steps_df.to_string(index=False))

    if args.output:
        export_csv(steps_df, args.output, {"cascade": computation.name})
        print(f"Steps saved to {args.output}")


def simulate_cmd(args):
    """Cascade simulation command."""
    from atomcascade.atomic.structures import UseGauge
    from atomcascade.cascade.simulation import (
        Simulation,
        SimulationProperty,
        simulate_level_distribution,
    )
    from atomcascade.io.cascade_data import load_cascade_data
    from atomcascade.io.reports import (
        export_csv,
        ion_distribution_to_dataframe,
        level_distribution_to_dataframe,
    )

    data = load_cascade_data(args.data)
    properties = [SimulationProperty(p) for p in args.properties]
    simulation = Simulation(properties=properties, gauge=UseGauge(args.gauge))
    result = simulate_level_distribution(simulation, data)

    print(f"Simulation of cascade '{result.name}' ({result.propagation.rounds} rounds)")
    if SimulationProperty.ION_DIST in properties:
        df = ion_distribution_to_dataframe(result.ion_distribution)
        print("\n(Final) ion distribution:")
        print(df.to_string(index=False))
        if args.output:
            export_csv(df, args.output, {"cascade": result.name, "property": "IonDist"})
            print(f"Ion distribution saved to {args.output}")
    if SimulationProperty.FINAL_DIST in properties:
        print("\n(Final) level distribution:")
        print(level_distribution_to_dataframe(result.level_distribution).to_string(index=False))
    if SimulationProperty.ELECTRON_INTENSITY in properties:
        print("\nElectron line intensities (energy in Hartree, intensity):")
        for energy, intensity in result.electron_intensities:
            print(f"{energy:.6e},{intensity:.6e}")
    if SimulationProperty.PHOTON_INTENSITY in properties:
        print("\nPhoton line intensities (energy in Hartree, intensity):")
        for energy, intensity in result.photon_intensities:
            print(f"{energy:.6e},{intensity:.6e}")


def pathways_cmd(args):
    """Dielectronic pathway listing command."""
    from atomcascade.core.config import load_config, validate_dielectronic_config
    from atomcascade.dielectronic.pathways import determine_pathways
    from atomcascade.dielectronic.settings import Settings
    from atomcascade.io.cascade_data import load_multiplet
    from atomcascade.io.reports import export_csv, pathways_to_dataframe

    logger.info(f"Loading configuration from {args.config}")
    config = load_config(args.config)
    validate_dielectronic_config(config)
    dr = config["dielectronic"]

    settings = Settings.from_config(dr)
    initial = load_multiplet(dr["initial_multiplet"])
    intermediate = load_multiplet(dr["intermediate_multiplet"])
    final = load_multiplet(dr["final_multiplet"])

    pathways = determine_pathways(final, intermediate, initial, settings)
    df = pathways_to_dataframe(pathways)

    print(f"Dielectronic pathways ({len(pathways)}):")
    if len(df) > 0:
        print(df.to_string(index=False))

    if args.output:
        export_csv(df, args.output, {"initial": initial.name, "final": final.name})
        print(f"Pathways saved to {args.output}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="AtomCascade: atomic decay cascades and dielectronic recombination",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Configuration generation command
    conf_parser = subparsers.add_parser(
        "configurations", help="Generate the configurations of a decay cascade"
    )
    conf_parser.add_argument("config", type=str, help="Path to configuration file (YAML or JSON)")
    conf_parser.set_defaults(func=configurations_cmd)

    # Block and step command
    steps_parser = subparsers.add_parser(
        "steps", help="Determine blocks and steps of a cascade from tabulated multiplets"
    )
    steps_parser.add_argument(
        "config", type=str, help="Path to configuration file (YAML or JSON)"
    )
    steps_parser.add_argument(
        "--output", type=str, default=None, help="CSV file for the step listing"
    )
    steps_parser.set_defaults(func=steps_cmd)

    # Simulation command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Propagate level occupations through saved cascade data"
    )
    simulate_parser.add_argument("data", type=str, help="Path to cascade data file (JSON)")
    simulate_parser.add_argument(
        "--properties",
        nargs="+",
        choices=["IonDist", "FinalDist", "ElectronIntensity", "PhotonIntensity"],
        default=["IonDist"],
        help="Properties to simulate (default: IonDist)",
    )
    simulate_parser.add_argument(
        "--gauge",
        choices=["Coulomb", "Babushkin"],
        default="Babushkin",
        help="Gauge of the radiative rates (default: Babushkin)",
    )
    simulate_parser.add_argument(
        "--output", type=str, default=None, help="CSV file for the ion distribution"
    )
    simulate_parser.set_defaults(func=simulate_cmd)

    # Dielectronic pathway command
    pathways_parser = subparsers.add_parser(
        "pathways", help="List the dielectronic pathways between three multiplets"
    )
    pathways_parser.add_argument(
        "config", type=str, help="Path to configuration file (YAML or JSON)"
    )
    pathways_parser.add_argument(
        "--output", type=str, default=None, help="CSV file for the pathway listing"
    )
    pathways_parser.set_defaults(func=pathways_cmd)

    args = parser.parse_args()

    # Setup logging
    setup_logging(level=args.log_level)

    # Execute command
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error executing command: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
