# omwx/packets/builder.py
"""
Station packet builder.

Single entry point for every caller (API, batch). One evaluation runs the
extractors once per report and feeds the same observations to the scorer,
the alert classifier, the policy evaluator and the trigger builder.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, List, Tuple, Iterable

from ..logging import get_logger
from ..settings import settings
from ..reports.models import RawReport, ReportKind, ReportValidationError, normalize_station
from ..reports.extract import parse_observation
from ..signals.severity import engine_ice_ops
from ..signals.alert import AlertLevel, assess_observation, classify_station, station_priorities
from ..runways.geometry import RunwayTable, EMPTY_RUNWAY_TABLE
from ..runways.loader import load_runway_table
from ..policy.engine import evaluate_policy_sets
from ..policy.minima import MinimaTable, minima_band, load_minima_table
from .models import StationAssessment
from .triggers import build_triggers

logger = get_logger(__name__)

DEFAULT_MAX_WORKERS = settings.batch_max_workers

StationReports = Tuple[Optional[RawReport], Optional[RawReport]]


def _min_present(*values: Optional[int]) -> Optional[int]:
    present = [v for v in values if v is not None]
    return min(present) if present else None


def validate_station_reports(
    metar: Optional[RawReport],
    taf: Optional[RawReport],
    icao: Optional[str] = None,
) -> str:
    """
    Check a METAR/TAF pair before evaluation.

    Args:
        metar: METAR report or None
        taf: TAF report or None
        icao: Station identifier, required when both reports are missing

    Returns:
        Normalized station identifier

    Raises:
        ReportValidationError: Wrong report kind, station mismatch, or no station
    """
    for report, expected in ((metar, ReportKind.METAR), (taf, ReportKind.TAF)):
        if report is None:
            continue
        if not isinstance(report, RawReport):
            raise ReportValidationError(f"Expected RawReport, got {type(report).__name__}")
        if report.kind is not expected:
            raise ReportValidationError(
                f"{report.kind.value} report passed where a {expected.value} was expected"
            )

    stations = {r.station_icao for r in (metar, taf) if r is not None}
    if icao is not None:
        stations.add(normalize_station(icao))

    if not stations:
        raise ReportValidationError("Station identifier required when no report is supplied")
    if len(stations) > 1:
        raise ReportValidationError(f"METAR/TAF station mismatch: {', '.join(sorted(stations))}")

    return stations.pop()


class StationPacketBuilder:
    """
    Builds station assessments against fixed reference tables.

    The runway and minima tables are read-only, so one builder can serve
    concurrent evaluations.
    """

    def __init__(
        self,
        runways: Optional[RunwayTable] = None,
        minima: Optional[MinimaTable] = None,
    ):
        self.runways = runways or EMPTY_RUNWAY_TABLE
        self.minima = minima

    def build(
        self,
        metar: Optional[RawReport],
        taf: Optional[RawReport],
        icao: Optional[str] = None,
    ) -> StationAssessment:
        """
        Build the complete assessment for one station.

        Args:
            metar: METAR report or None
            taf: TAF report or None
            icao: Station identifier (optional when a report is supplied)

        Returns:
            StationAssessment
        """
        station = validate_station_reports(metar, taf, icao)

        met = parse_observation(metar, ReportKind.METAR)
        fcst = parse_observation(taf, ReportKind.TAF)

        metar_severity = assess_observation(met)
        taf_severity = assess_observation(fcst)
        ice_ops = engine_ice_ops(met)
        severity = classify_station(met, fcst, metar_severity.score, taf_severity.score)

        runways = self.runways.resolve(station)
        policy, policy_metar, policy_taf = evaluate_policy_sets(met, fcst, runways)

        worst_vis = _min_present(met.visibility_m, fcst.visibility_m)
        ceiling = _min_present(met.ceiling_ft, fcst.ceiling_ft)
        metar_priority, taf_priority = station_priorities(
            metar_severity.score, taf_severity.score, ice_ops
        )

        assessment = StationAssessment(
            station_icao=station,
            metar=met,
            taf=fcst,
            metar_severity=metar_severity,
            taf_severity=taf_severity,
            severity=severity,
            engine_ice_ops=ice_ops,
            worst_visibility_m=worst_vis,
            rvr_min_m=_min_present(met.rvr_m, fcst.rvr_m),
            ceiling_ft=ceiling,
            policy=policy,
            policy_metar=policy_metar,
            policy_taf=policy_taf,
            minima_band=minima_band(self.minima, station, worst_vis, ceiling),
            triggers=build_triggers(met, fcst, policy_metar, policy_taf, ice_ops),
            metar_priority=metar_priority,
            taf_priority=taf_priority,
        )

        logger.bind(station=station).debug(
            "station_evaluated",
            alert=severity.alert_level,
            score=severity.score,
            triggers=[t.label for t in assessment.triggers],
        )
        return assessment

    def build_many(
        self,
        stations: Iterable[StationReports],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> List[StationAssessment]:
        """
        Evaluate many stations in parallel.

        Every pair is validated before any work is scheduled, so a bad
        request fails as a whole. Results keep the input order.

        Raises:
            ReportValidationError: If any pair is invalid
        """
        pairs = list(stations)
        for metar, taf in pairs:
            validate_station_reports(metar, taf)

        if not pairs:
            return []

        # Evaluations share only the read-only tables
        workers = max(1, min(max_workers, len(pairs)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.build, metar, taf) for metar, taf in pairs]
            results = [future.result() for future in futures]

        crit = sum(1 for r in results if r.alert_level is AlertLevel.CRIT)
        logger.info("batch_evaluated", stations=len(results), crit=crit, workers=workers)
        return results


def evaluate_station(
    metar: Optional[RawReport],
    taf: Optional[RawReport],
    runways: Optional[RunwayTable] = None,
    minima: Optional[MinimaTable] = None,
    icao: Optional[str] = None,
) -> StationAssessment:
    """Convenience function to evaluate one station."""
    return StationPacketBuilder(runways, minima).build(metar, taf, icao)


def evaluate_stations(
    stations: Iterable[StationReports],
    runways: Optional[RunwayTable] = None,
    minima: Optional[MinimaTable] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[StationAssessment]:
    """Convenience function to evaluate many (metar, taf) pairs in parallel."""
    return StationPacketBuilder(runways, minima).build_many(stations, max_workers)


# Singleton builder for the service, tables loaded from settings
_builder: Optional[StationPacketBuilder] = None


def get_station_builder() -> StationPacketBuilder:
    """
    Get or create the singleton StationPacketBuilder.

    Loads RUNWAYS_PATH and MINIMA_PATH on first use; a station missing
    from the runway table simply has no crosswind advisory.
    """
    global _builder
    if _builder is None:
        runways = load_runway_table(settings.runways_path) if settings.runways_path else None
        minima = load_minima_table(settings.minima_path) if settings.minima_path else None
        _builder = StationPacketBuilder(runways, minima)
        logger.info(
            "station_builder_ready",
            runway_stations=len(_builder.runways),
            minima_stations=len(minima) if minima else 0,
        )
    return _builder
