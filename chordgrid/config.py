"""Editor configuration with environment overrides."""

import os
from dataclasses import dataclass, replace

MIN_MEASURES_PER_LINE = 1
MAX_MEASURES_PER_LINE = 10


@dataclass(frozen=True)
class EditorConfig:
    """
    Tunable defaults for a chord grid editing session.

    Attributes:
        history_capacity:          Maximum number of undo snapshots kept.
        default_measures_total:    Measure count of a newly added part.
        default_measures_per_line: Layout width of a newly added part.
        max_measures_total:        Upper clamp for a part's measure count.
        default_title:             Title of a fresh document.
        default_tempo:             Tempo (BPM) of a fresh document.
        default_part_names:        Empty parts seeded into a fresh document.
    """

    history_capacity: int = 200
    default_measures_total: int = 8
    default_measures_per_line: int = 4
    max_measures_total: int = 200
    default_title: str = "Untitled"
    default_tempo: int = 120
    default_part_names: tuple[str, ...] = ("Intro", "Verse", "Chorus")

    def __post_init__(self) -> None:
        if self.history_capacity < 1:
            raise ValueError(f"history_capacity must be at least 1, got {self.history_capacity}")
        if self.max_measures_total < 1:
            raise ValueError(f"max_measures_total must be at least 1, got {self.max_measures_total}")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "EditorConfig":
        """
        Build a config from ``CHORDGRID_*`` environment variables.

        Recognised variables: ``CHORDGRID_HISTORY_CAPACITY`` and
        ``CHORDGRID_MAX_MEASURES``. Unset or blank variables keep the default.

        Raises:
            ValueError: If a variable is set to something that is not an integer.
        """
        env = os.environ if environ is None else environ
        config = cls()
        capacity = env.get("CHORDGRID_HISTORY_CAPACITY", "").strip()
        if capacity:
            config = replace(config, history_capacity=int(capacity))
        max_measures = env.get("CHORDGRID_MAX_MEASURES", "").strip()
        if max_measures:
            config = replace(config, max_measures_total=int(max_measures))
        return config
