"""Analyse seismic events for anomalous deep rupture behaviour."""

from pathlib import Path
from typing import Annotated, Optional

import pandas as pd
import typer

from deep_rupture import records
from deep_rupture.pipeline import AnalysisConfig, AnalysisPipeline
from deep_rupture.profile import DEFAULT_PROFILE


def analyse_events(
    events_ffp: Annotated[
        Path,
        typer.Argument(
            help="JSON file containing an event or list of events.",
            exists=True,
            readable=True,
            dir_okay=False,
        ),
    ],
    profile_ffp: Annotated[
        Optional[Path],
        typer.Option(
            "--profile",
            help="JSON geological profile. Defaults to the built-in subduction zone profile.",
            exists=True,
            readable=True,
            dir_okay=False,
        ),
    ] = None,
    output_ffp: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            help="Output path for JSON analysis results. If not given, a table is printed.",
            writable=True,
            dir_okay=False,
        ),
    ] = None,
    lenient: Annotated[
        bool,
        typer.Option(help="Score events outside the profile depth range instead of failing."),
    ] = False,
    anomaly_threshold: Annotated[
        float,
        typer.Option(
            help="Confidence above which an event is anomalous.",
            min=0,
            max=100,
        ),
    ] = 0.0,
    critical: Annotated[
        bool, typer.Option(help="Distinguish critical risk from high risk.")
    ] = True,
):
    """Analyse seismic events for anomalous deep rupture behaviour."""
    profile = records.read_profile(profile_ffp) if profile_ffp else DEFAULT_PROFILE
    pipeline = AnalysisPipeline(
        profile,
        AnalysisConfig(
            strict=not lenient,
            anomaly_threshold=anomaly_threshold,
            distinguish_critical=critical,
        ),
    )
    events = records.read_events(events_ffp)

    if output_ffp:
        records.write_results(pipeline.analyse_many(events), output_ffp)
        return

    analysis_df = pipeline.analysis_dataframe(events)
    with pd.option_context("display.max_columns", None, "display.width", None):
        print(analysis_df.to_string())


def main():
    typer.run(analyse_events)


if __name__ == "__main__":
    main()
