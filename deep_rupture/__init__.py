"""Deep Rupture

The deep rupture package analyses deep-focus (subduction zone)
earthquakes for anomalous rupture behaviour.

Geological Profiles and Events
------------------------------

A `deep_rupture.profile.GeologicalProfile` describes the envelope an
event is analysed against: a valid depth range, a thermal gradient
threshold, a pressure factor and the accepted rock types. Events are
`deep_rupture.events.SeismicEvent` records. Both can be read from JSON
with `deep_rupture.records`.

Calculators
-----------

The `deep_rupture.thermal`, `deep_rupture.stress` and
`deep_rupture.rupture_velocity` modules contain the empirical
relationships used to derive temperatures, stress states and rupture
velocities. The `deep_rupture.rupture_pattern` module composes them to
derive a `RupturePattern` from an event.

Scoring and Risk
----------------

The `deep_rupture.scoring` module evaluates an ordered table of
weighted indicator rules against a rupture pattern, producing a
confidence on a [0, 100] scale. The `deep_rupture.risk` module maps the
confidence to a risk level, and `deep_rupture.pipeline` combines every
step into an `AnalysisPipeline`.

Scripts
-------

- `analyse-events` (`deep_rupture.scripts.analyse_events`): analyse a
  JSON file of events from the command line."""
