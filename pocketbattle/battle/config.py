"""
Battle timing and layout configuration.
"""

from __future__ import annotations


class BattleConfig:
    """
    Configuration for battle pacing.

    Pauses are policy, not protocol: tests and scripted runs shrink
    them to keep the sequence identical but fast.
    """

    def __init__(
        self,
        attack_pause: float = 0.75,
        faint_pause: float = 2.0,
        letters_per_second: float = 30.0,
        dialog_hold: float = 1.0,
        hp_speed: float = 0.5,
        attack_duration: float = 0.6,
        hit_duration: float = 0.4,
        faint_duration: float = 0.6,
    ):
        # Seconds between the attack animation and the hit reaction
        self.attack_pause = attack_pause
        # Seconds after a faint before the result is reported
        self.faint_pause = faint_pause
        # Typewriter speed of the dialog box
        self.letters_per_second = letters_per_second
        # Seconds a fully typed line stays up before type_dialog completes
        self.dialog_hold = dialog_hold
        # HP bar speed, in fractions of the full bar per second
        self.hp_speed = hp_speed
        self.attack_duration = attack_duration
        self.hit_duration = hit_duration
        self.faint_duration = faint_duration

    @classmethod
    def instant(cls) -> BattleConfig:
        """Every effect completes on the next tick."""
        return cls(
            attack_pause=0.0,
            faint_pause=0.0,
            letters_per_second=1_000_000.0,
            dialog_hold=0.0,
            hp_speed=1_000_000.0,
            attack_duration=0.0,
            hit_duration=0.0,
            faint_duration=0.0,
        )
