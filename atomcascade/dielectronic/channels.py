"""
Capture and stabilization channels of a dielectronic-recombination pathway.
"""

from dataclasses import dataclass
from typing import List

from atomcascade.atomic.angular import allowed_kappas, is_allowed_multipole
from atomcascade.atomic.structures import (
    EmGauge,
    EmMultipole,
    Level,
    LevelSymmetry,
    UseGauge,
)
from atomcascade.core.logging_config import get_logger
from atomcascade.dielectronic.settings import Settings

logger = get_logger("dielectronic.channels")


@dataclass(frozen=True)
class AugerChannel:
    """
    Electron capture (inverse Auger) channel.

    Attributes
    ----------
    kappa : int
        Partial wave of the captured electron
    symmetry : LevelSymmetry
        Total symmetry of the resonance
    phase : float
        Continuum phase
    amplitude : complex
        Capture amplitude (0 until evaluated)
    """

    kappa: int
    symmetry: LevelSymmetry
    phase: float = 0.0
    amplitude: complex = 0j


@dataclass(frozen=True)
class RadiativeChannel:
    """
    Photon emission (stabilization) channel.

    Attributes
    ----------
    multipole : EmMultipole
        Multipole of the emitted photon
    gauge : EmGauge
        Coulomb or Babushkin for electric multipoles, Magnetic otherwise
    amplitude : complex
        Emission amplitude (0 until evaluated)
    """

    multipole: EmMultipole
    gauge: EmGauge
    amplitude: complex = 0j


@dataclass(frozen=True)
class DielectronicChannel:
    """One capture channel combined with one radiative channel."""

    auger_channel: AugerChannel
    radiative_channel: RadiativeChannel


def determine_capture_channels(sym_i: LevelSymmetry, sym_n: LevelSymmetry) -> List[AugerChannel]:
    """Capture channels from the initial into the intermediate symmetry."""
    return [AugerChannel(kappa, sym_n) for kappa in allowed_kappas(sym_i, sym_n)]


def determine_radiative_channels(
    sym_n: LevelSymmetry, sym_f: LevelSymmetry, settings: Settings
) -> List[RadiativeChannel]:
    """
    Radiative channels from the intermediate into the final symmetry.

    Electric multipoles get one channel per requested gauge; a magnetic
    multipole gets a single Magnetic channel as soon as any gauge is
    requested.
    """
    channels: List[RadiativeChannel] = []
    for mp in settings.multipoles:
        if not is_allowed_multipole(sym_n, mp, sym_f):
            continue
        has_magnetic = False
        for gauge in settings.gauges:
            if mp.is_electric and gauge is UseGauge.COULOMB:
                channels.append(RadiativeChannel(mp, EmGauge.COULOMB))
            elif mp.is_electric and gauge is UseGauge.BABUSHKIN:
                channels.append(RadiativeChannel(mp, EmGauge.BABUSHKIN))
            elif not mp.is_electric and not has_magnetic:
                channels.append(RadiativeChannel(mp, EmGauge.MAGNETIC))
                has_magnetic = True
    return channels


def determine_channels(
    final_level: Level, intermediate_level: Level, initial_level: Level, settings: Settings
) -> List[DielectronicChannel]:
    """
    All channels of the pathway initial -> intermediate -> final.

    Parameters
    ----------
    final_level, intermediate_level, initial_level : Level
        Levels of the pathway
    settings : Settings
        Requested multipoles and gauges

    Returns
    -------
    List[DielectronicChannel]
        Product of capture and radiative channels; empty if either set is
        empty
    """
    sym_i = initial_level.symmetry
    sym_n = intermediate_level.symmetry
    sym_f = final_level.symmetry

    a_channels = determine_capture_channels(sym_i, sym_n)
    r_channels = determine_radiative_channels(sym_n, sym_f, settings)

    channels = [DielectronicChannel(a, r) for a in a_channels for r in r_channels]
    logger.debug(
        f"Channels {sym_i} -> {sym_n} -> {sym_f}: {len(a_channels)} capture x "
        f"{len(r_channels)} radiative"
    )
    return channels
