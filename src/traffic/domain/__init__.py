from .entities import (
    COLORS, MAKERS, ALL_COHORTS, MIN_RATE, PATTERN_PRESETS,
    Cohort, TrafficPattern, RoadRates, PatternPreset, Road,
    TrafficRegime, RecentEntry, SamplePoint, BackfillWindow,
)
from .protocols import RandomSource, TrafficInstruments, SampleEncoder
