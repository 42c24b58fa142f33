"""
Game Metadata - Static per-game configuration handed to every reducer call.

None of this changes during a game. The reducer reads it but never stores it
inside GameState.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..variants import Variant, get_variant


MIN_PLAYERS = 2
MAX_PLAYERS = 6


@dataclass(frozen=True)
class GameOptions:
    """
    Options chosen when the table was created.

    Args:
        num_players: Number of seats (2-6)
        starting_player: Index of the player who takes the first turn
        variant_name: Name looked up in the variant table
        timed: Player times count down instead of up
        card_cycle: The giver's chop moves to the front of their hand after a clue
        deck_plays: The last card of the deck may be blind-played
        one_extra_card: Hands hold one more card than normal
        one_less_card: Hands hold one fewer card than normal
        all_or_nothing: Anything short of the max score is a loss
    """
    num_players: int = 2
    starting_player: int = 0
    variant_name: str = "No Variant"
    timed: bool = False
    card_cycle: bool = False
    deck_plays: bool = False
    one_extra_card: bool = False
    one_less_card: bool = False
    all_or_nothing: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if self.num_players < MIN_PLAYERS or self.num_players > MAX_PLAYERS:
            raise ValueError(
                f"Games support {MIN_PLAYERS}-{MAX_PLAYERS} players, got {self.num_players}"
            )
        if not 0 <= self.starting_player < self.num_players:
            raise ValueError(
                f"Starting player {self.starting_player} is not a seat at a "
                f"{self.num_players}-player table"
            )
        if self.one_extra_card and self.one_less_card:
            raise ValueError("one_extra_card and one_less_card are mutually exclusive")

    @property
    def variant(self) -> Variant:
        return get_variant(self.variant_name)


@dataclass(frozen=True)
class GameMetadata:
    """Player names, options and the viewer's seat."""
    player_names: tuple[str, ...]
    options: GameOptions = field(default_factory=GameOptions)
    our_player_index: int | None = None  # None for spectators

    def __post_init__(self):
        if len(self.player_names) != self.options.num_players:
            raise ValueError(
                f"Got {len(self.player_names)} player names for a "
                f"{self.options.num_players}-player game"
            )

    @property
    def variant(self) -> Variant:
        return self.options.variant

    def player_name(self, player_index: int | None) -> str:
        if player_index is None or not 0 <= player_index < len(self.player_names):
            return "[unknown]"
        return self.player_names[player_index]

    @classmethod
    def create(
        cls,
        player_names: list[str] | tuple[str, ...],
        variant_name: str = "No Variant",
        our_player_index: int | None = None,
        **options,
    ) -> GameMetadata:
        """Factory that derives num_players from the names."""
        return cls(
            player_names=tuple(player_names),
            options=GameOptions(
                num_players=len(player_names),
                variant_name=variant_name,
                **options,
            ),
            our_player_index=our_player_index,
        )


@dataclass(frozen=True)
class ReducerFlags:
    """
    How the viewer relates to the game being reduced.

    playing: the viewer is seated in the ongoing game
    shadowing: the viewer is a spectator replaying as a seated player
    finished: the game is over (a replay of a finished game)
    hypothetical: the action belongs to a "what-if" branch
    """
    playing: bool = False
    shadowing: bool = False
    finished: bool = False
    hypothetical: bool = False

    @property
    def sees_as_player(self) -> bool:
        return self.playing or self.shadowing
