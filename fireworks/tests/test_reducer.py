"""
Tests for the reducer (state transitions).

Tests:
- Action application
- State mutation correctness
- Derivation pipeline
- Error handling and atomicity
"""

import pytest

from ..api.schemas import snapshot_json
from ..engine_core.action import (
    ActionClue,
    ActionDiscard,
    ActionDraw,
    ActionGameOver,
    ActionNoteList,
    ActionPlay,
    ActionPlayerTimes,
    ActionStrike,
    ActionType,
    Clue,
)
from ..engine_core.metadata import GameMetadata, ReducerFlags
from ..engine_core.reducer import (
    ACTION_HANDLERS,
    DERIVATION_STAGES,
    Reducer,
    apply_action,
    game_state_reducer,
)
from ..engine_core.setup import initial_game_state
from ..engine_core.state import (
    CardLocation,
    CardStatus,
    ClueRecord,
    EndCondition,
    StackDirection,
    StrikeRecord,
    TurnPhase,
)
from ..errors import InvalidInputError, StateConsistencyError
from ..variants import ClueType, START_CARD_RANK
from .conftest import ALICE_CARDS, BOB_CARDS, deal_actions, reduce_all


FIVES_TO_BOB = ActionClue(
    clue=Clue(type=ClueType.RANK, value=5),
    giver=0,
    target=1,
    touched=(8, 9),
)


def red_stack_actions():
    """Alice plays red 1, then Bob plays red 2 through red 5."""
    return [
        ActionPlay(player_index=0, order=0, suit_index=0, rank=1),
        ActionDraw(player_index=0, order=10, suit_index=2, rank=2),
        ActionPlay(player_index=1, order=5, suit_index=0, rank=2),
        ActionDraw(player_index=1, order=11, suit_index=2, rank=3),
        ActionPlay(player_index=1, order=6, suit_index=0, rank=3),
        ActionDraw(player_index=1, order=12, suit_index=3, rank=2),
        ActionPlay(player_index=1, order=7, suit_index=0, rank=4),
        ActionDraw(player_index=1, order=13, suit_index=3, rank=3),
        ActionPlay(player_index=1, order=8, suit_index=0, rank=5),
    ]


class TestInitialDeal:
    """Tests for the opening deal."""

    def test_initial_state(self, empty_state):
        """Before the deal every card is in the deck and the clue tokens are full."""
        assert len(empty_state.deck) == 50
        assert all(card.location == CardLocation.DECK for card in empty_state.deck)
        assert empty_state.cards_remaining_in_the_deck == 50
        assert empty_state.clue_tokens == 8
        assert empty_state.turn.phase == TurnPhase.PRE_DEAL
        assert empty_state.turn.segment is None
        assert empty_state.stats.max_score == 25

    def test_deal_logs_who_goes_first(self, dealt_state):
        """The deal-completing draw adds a single "goes first" entry."""
        assert [entry.text for entry in dealt_state.log] == ["Alice goes first"]
        assert dealt_state.log[0].turn == 1

    def test_starting_player_goes_first(self):
        metadata = GameMetadata.create(["Alice", "Bob"], starting_player=1)
        state = reduce_all(
            initial_game_state(metadata),
            deal_actions([ALICE_CARDS, BOB_CARDS]),
            metadata,
        )

        assert state.log[-1].text == "Bob goes first"
        assert state.turn.current_player_index == 1

    def test_deal_starts_the_game(self, dealt_state):
        assert dealt_state.hands == [[0, 1, 2, 3, 4], [5, 6, 7, 8, 9]]
        assert dealt_state.cards_remaining_in_the_deck == 40
        assert dealt_state.turn.segment == 0
        assert dealt_state.turn.phase == TurnPhase.IN_PROGRESS
        assert dealt_state.turn.current_player_index == 0

    def test_dealt_cards_are_marked(self, dealt_state):
        card = dealt_state.deck[7]
        assert card.location == CardLocation.HAND
        assert card.holder == 1
        assert card.identity == (0, 4)
        assert card.dealt_to_starting_hand
        assert card.segment_drawn is None

    def test_no_log_before_deal_finishes(self, empty_state, metadata):
        state = reduce_all(empty_state, deal_actions([ALICE_CARDS])[:3], metadata)
        assert state.log == []
        assert state.turn.segment is None


class TestClueAction:
    """Tests for clue action."""

    def test_clue_costs_a_token(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        assert state.clue_tokens == 7

    def test_clue_is_recorded(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)

        assert state.clues == [ClueRecord(
            type=ClueType.RANK,
            value=5,
            giver=0,
            target=1,
            segment=0,
            touched=(8, 9),
            not_touched=(5, 6, 7),
        )]

    def test_ignore_negative_records_no_negative_list(self, dealt_state, metadata, flags):
        action = ActionClue(
            clue=Clue(type=ClueType.RANK, value=5),
            giver=0,
            target=1,
            touched=(8, 9),
            ignore_negative=True,
        )
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert state.clues[-1].not_touched == ()
        assert state.deck[5].negative_rank_clues == ()

    def test_clue_narration(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        assert state.log[-1].text == "Alice tells Bob about two fives"
        assert state.log[-1].turn == 1

    def test_color_clue_narration(self, dealt_state, metadata, flags):
        action = ActionClue(
            clue=Clue(type=ClueType.COLOR, value=0),
            giver=0,
            target=1,
            touched=(5, 6, 7, 8),
        )
        state = game_state_reducer(dealt_state, action, flags, metadata)
        assert state.log[-1].text == "Alice tells Bob about four reds"

    def test_clue_updates_card_knowledge(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)

        touched = state.deck[8]
        assert touched.num_positive_clues == 1
        assert touched.positive_rank_clues == (5,)
        assert touched.segment_first_clued == 0
        assert set(touched.possible_cards) == {(suit, 5) for suit in range(5)}

        untouched = state.deck[5]
        assert untouched.num_positive_clues == 0
        assert untouched.negative_rank_clues == (5,)
        assert all(rank != 5 for _, rank in untouched.possible_cards)

    def test_clue_ends_the_turn(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)

        assert state.turn.turn_num == 1
        assert state.turn.current_player_index == 1
        assert state.turn.segment == 1

    def test_clue_before_deal_fails(self, empty_state, metadata, flags):
        with pytest.raises(StateConsistencyError):
            game_state_reducer(empty_state, FIVES_TO_BOB, flags, metadata)

    def test_card_cycle_moves_chop_to_front(self):
        metadata = GameMetadata.create(["Alice", "Bob"], card_cycle=True)
        state = reduce_all(
            initial_game_state(metadata),
            deal_actions([ALICE_CARDS, BOB_CARDS]) + [FIVES_TO_BOB],
            metadata,
        )

        assert state.hands[0] == [1, 2, 3, 4, 0]

    def test_no_card_cycle_by_default(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        assert state.hands[0] == [0, 1, 2, 3, 4]


class TestPlayAction:
    """Tests for play action."""

    def test_play_moves_card_to_stack(self, dealt_state, metadata, flags):
        action = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert state.play_stacks[0] == [0]
        assert 0 not in state.hands[0]
        assert state.deck[0].location == CardLocation.PLAY_STACK
        assert state.score == 1

    def test_play_narration(self, dealt_state, metadata, flags):
        action = ActionPlay(player_index=0, order=4, suit_index=4, rank=1)
        state = game_state_reducer(dealt_state, action, flags, metadata)
        assert state.log[-1].text == "Alice plays purple 1 from slot #1 (blind)"

    def test_completing_a_stack_grants_a_clue(self, dealt_state, metadata, flags):
        """Finishing a stack gives a clue token back and scores exactly one point."""
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        actions = red_stack_actions()
        before_last = reduce_all(state, actions[:-1], metadata)
        after = game_state_reducer(before_last, actions[-1], flags, metadata)

        assert before_last.clue_tokens == 7
        assert after.clue_tokens == 8
        assert after.score == before_last.score + 1 == 5
        assert after.play_stacks[0] == [0, 5, 6, 7, 8]
        assert after.log[-1].text == "Bob plays red 5 from slot #5"

    def test_completing_a_stack_at_max_clues_is_wasted(self, dealt_state, metadata):
        state = reduce_all(dealt_state, red_stack_actions(), metadata)

        assert state.clue_tokens == 8
        assert state.stats.potential_clues_lost == 1

    def test_play_from_deck_has_no_slot(self, dealt_state, metadata, flags):
        action = ActionPlay(player_index=0, order=30, suit_index=0, rank=1)
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert state.hands[0] == [0, 1, 2, 3, 4]
        assert state.log[-1].text == "Alice plays red 1 from the deck (blind)"

    def test_play_with_negative_suit_fails(self, dealt_state, metadata, flags):
        action = ActionPlay(player_index=0, order=0, suit_index=-1, rank=1)
        with pytest.raises(InvalidInputError):
            game_state_reducer(dealt_state, action, flags, metadata)

    def test_play_waits_for_draw_to_end_turn(self, dealt_state, metadata, flags):
        play = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        after_play = game_state_reducer(dealt_state, play, flags, metadata)

        assert after_play.turn.current_player_index == 0
        assert after_play.turn.cards_played_or_discarded_this_turn == 1

        draw = ActionDraw(player_index=0, order=10, suit_index=2, rank=2)
        after_draw = game_state_reducer(after_play, draw, flags, metadata)

        assert after_draw.turn.current_player_index == 1
        assert after_draw.turn.turn_num == 1
        assert after_draw.turn.cards_played_or_discarded_this_turn == 0
        assert after_draw.deck[10].segment_drawn == 0
        assert not after_draw.deck[10].dealt_to_starting_hand


class TestDiscardAction:
    """Tests for discard action."""

    def test_discard_regains_a_clue(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        action = ActionDiscard(player_index=1, order=5, suit_index=0, rank=2)
        state = game_state_reducer(state, action, flags, metadata)

        assert state.clue_tokens == 8
        assert state.discard_stacks[0] == [5]
        assert state.deck[5].location == CardLocation.DISCARD
        assert state.log[-1].text == "Bob discards red 2 from slot #5"

    def test_discard_not_in_hand_then_bad_suit(self, dealt_state, metadata, flags):
        """A discard of a card nobody holds is logged; a negative suit index is rejected."""
        missing = ActionDiscard(player_index=0, order=20, suit_index=1, rank=2)
        state = game_state_reducer(dealt_state, missing, flags, metadata)

        assert state.hands[0] == [0, 1, 2, 3, 4]
        assert state.log[-1].text == "Alice discards yellow 2 from the deck"
        assert state.discard_stacks[1] == [20]

        bad_suit = ActionDiscard(player_index=0, order=1, suit_index=-1, rank=-1)
        with pytest.raises(InvalidInputError):
            game_state_reducer(state, bad_suit, flags, metadata)
        assert state.hands[0] == [0, 1, 2, 3, 4]

    def test_misplay_narration(self, dealt_state, metadata, flags):
        action = ActionDiscard(player_index=0, order=4, suit_index=4, rank=1, failed=True)
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert state.log[-1].text == "Alice fails to play purple 1 from slot #1 (blind)"
        assert state.deck[4].is_misplayed
        assert state.clue_tokens == 8

    def test_misplay_of_clued_card(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        action = ActionDiscard(player_index=1, order=8, suit_index=0, rank=5, failed=True)
        state = game_state_reducer(state, action, flags, metadata)

        assert state.log[-1].text == "Bob fails to play red 5 from slot #2 (clued)"


class TestHoleVariant:
    """Tests for "Throw It in a Hole" redirection."""

    def test_play_goes_into_the_hole(self, hole_state, hole_metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        state = game_state_reducer(hole_state, action, ReducerFlags(playing=True), hole_metadata)

        assert state.hole == [0]
        assert state.num_attempted_cards_played == 1
        assert state.score == 1
        assert all(stack == [] for stack in state.play_stacks)
        assert state.deck[0].location == CardLocation.HOLE
        assert state.stats.num_attempted_cards_played == 1
        assert state.log[-1].text == "Alice plays a card from slot #5 (blind)"

    def test_misplay_goes_into_the_hole(self, hole_state, hole_metadata):
        action = ActionDiscard(player_index=0, order=1, suit_index=1, rank=1, failed=True)
        state = game_state_reducer(hole_state, action, ReducerFlags(playing=True), hole_metadata)

        assert state.hole == [1]
        assert all(stack == [] for stack in state.discard_stacks)
        assert state.log[-1].text == "Alice plays yellow 1 from slot #4 (blind)"

    def test_spectators_see_the_stacks(self, hole_state, hole_metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        state = game_state_reducer(hole_state, action, ReducerFlags(), hole_metadata)

        assert state.hole == []
        assert state.play_stacks[0] == [0]

    def test_finished_games_are_not_redirected(self, hole_state, hole_metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        flags = ReducerFlags(playing=True, finished=True)
        state = game_state_reducer(hole_state, action, flags, hole_metadata)

        assert state.hole == []

    def test_hidden_card_goes_into_the_hole(self, hole_state, hole_metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=-1, rank=-1)
        state = game_state_reducer(hole_state, action, ReducerFlags(playing=True), hole_metadata)

        assert state.hole == [0]
        assert state.card_status == hole_state.card_status

    def test_suit_out_of_range_fails(self, hole_state, hole_metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=5, rank=1)
        with pytest.raises(InvalidInputError):
            game_state_reducer(hole_state, action, ReducerFlags(playing=True), hole_metadata)

    def test_misplay_suit_out_of_range_fails(self, hole_state, hole_metadata):
        action = ActionDiscard(player_index=0, order=1, suit_index=9, rank=1, failed=True)
        with pytest.raises(InvalidInputError):
            game_state_reducer(hole_state, action, ReducerFlags(playing=True), hole_metadata)


def dealt_game(variant_name, alice_cards):
    """Deal Alice the given cards and Bob the usual hand in another variant."""
    metadata = GameMetadata.create(["Alice", "Bob"], variant_name=variant_name)
    state = initial_game_state(metadata)
    return reduce_all(state, deal_actions([alice_cards, BOB_CARDS]), metadata), metadata


class TestStackDerivation:
    """Tests for stack direction, sudoku start and card status after plays and discards."""

    def test_up_or_down_start_then_four_goes_down(self, flags):
        alice_cards = [(0, START_CARD_RANK), (0, 4), (1, 1), (2, 1), (3, 1)]
        state, metadata = dealt_game("Up or Down (5 Suits)", alice_cards)
        assert state.play_stack_directions[0] == StackDirection.UNDECIDED

        start = ActionPlay(player_index=0, order=0, suit_index=0, rank=START_CARD_RANK)
        state = game_state_reducer(state, start, flags, metadata)
        assert state.play_stack_directions[0] == StackDirection.UNDECIDED

        four = ActionPlay(player_index=0, order=1, suit_index=0, rank=4)
        state = game_state_reducer(state, four, flags, metadata)

        assert state.play_stack_directions[0] == StackDirection.DOWN
        assert state.card_status[0][5] == CardStatus.TRASH
        assert state.card_status[0][2] == CardStatus.NEEDS_TO_BE_PLAYED
        assert state.card_status[0][1] == CardStatus.CRITICAL
        assert state.play_stack_directions[1] == StackDirection.UNDECIDED

    def test_reversed_suit_is_built_down(self, flags):
        alice_cards = [(4, 5), (4, 4), (4, 3), (4, 2), (4, 1)]
        state, metadata = dealt_game("Reversed (5 Suits)", alice_cards)
        assert state.play_stack_directions[4] == StackDirection.DOWN

        state = game_state_reducer(
            state,
            ActionPlay(player_index=0, order=0, suit_index=4, rank=5),
            flags,
            metadata,
        )
        assert state.play_stack_directions[4] == StackDirection.DOWN
        assert state.card_status[4][5] == CardStatus.TRASH
        assert state.card_status[4][4] == CardStatus.NEEDS_TO_BE_PLAYED
        assert state.card_status[4][1] == CardStatus.CRITICAL

        state = reduce_all(state, [
            ActionPlay(player_index=0, order=order, suit_index=4, rank=5 - order)
            for order in range(1, 5)
        ], metadata)

        assert state.play_stacks[4] == [0, 1, 2, 3, 4]
        assert state.play_stack_directions[4] == StackDirection.FINISHED
        assert all(status == CardStatus.TRASH for status in state.card_status[4].values())

    def test_sudoku_stack_starts_at_first_play(self, flags):
        alice_cards = [(0, 3), (1, 1), (2, 1), (3, 1), (4, 1)]
        state, metadata = dealt_game("Sudoku (5 Suits)", alice_cards)
        assert state.play_stack_starts[0] is None

        action = ActionPlay(player_index=0, order=0, suit_index=0, rank=3)
        state = game_state_reducer(state, action, flags, metadata)

        assert state.play_stack_starts[0] == 3
        assert state.play_stack_starts[1] is None
        assert state.play_stack_directions[0] == StackDirection.UP
        assert state.card_status[0][3] == CardStatus.TRASH
        assert state.card_status[0][2] == CardStatus.NEEDS_TO_BE_PLAYED

    def test_discards_make_cards_critical_then_trash(self, dealt_state, metadata):
        assert dealt_state.card_status[0][2] == CardStatus.NEEDS_TO_BE_PLAYED

        state = reduce_all(dealt_state, [
            FIVES_TO_BOB,
            ActionDiscard(player_index=1, order=5, suit_index=0, rank=2),
        ], metadata)
        assert state.card_status[0][2] == CardStatus.CRITICAL
        assert state.card_status[0][3] == CardStatus.NEEDS_TO_BE_PLAYED

        state = reduce_all(state, [
            ActionDraw(player_index=1, order=10, suit_index=0, rank=2),
            ActionDiscard(player_index=1, order=10, suit_index=0, rank=2),
        ], metadata)

        assert state.card_status[0][3] == CardStatus.TRASH
        assert state.card_status[0][5] == CardStatus.TRASH
        assert state.card_status[0][1] == CardStatus.NEEDS_TO_BE_PLAYED


class TestOtherActions:
    """Tests for draw, strike, gameOver, playerTimes and no-op actions."""

    def test_strike_is_recorded(self, dealt_state, metadata, flags):
        action = ActionStrike(num=1, turn=1, order=0)
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert state.strikes == [StrikeRecord(order=0, segment=0)]
        assert state.stats.potential_clues_lost == 1

    def test_game_over_normal_keeps_score(self, dealt_state, metadata, flags):
        play = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        state = game_state_reducer(dealt_state, play, flags, metadata)
        action = ActionGameOver(end_condition=EndCondition.NORMAL, player_index=0)
        state = game_state_reducer(state, action, flags, metadata)

        assert state.score == 1
        assert state.log[-1].text == "Players score 1 points."
        assert state.turn.phase == TurnPhase.ENDED
        assert state.turn.current_player_index is None
        assert state.turn.segment == 1

    def test_game_over_abnormal_resets_score(self, dealt_state, metadata, flags):
        play = ActionPlay(player_index=0, order=0, suit_index=0, rank=1)
        state = game_state_reducer(dealt_state, play, flags, metadata)
        action = ActionGameOver(end_condition=EndCondition.TIMEOUT, player_index=1)
        state = game_state_reducer(state, action, flags, metadata)

        assert state.score == 0
        assert state.log[-1].text == "Bob ran out of time!"
        assert state.turn.end_condition == EndCondition.TIMEOUT
        assert state.stats.pace is None

    def test_player_times(self, dealt_state, metadata, flags):
        action = ActionPlayerTimes(player_times=(-61001, -5000), duration=66001)
        state = game_state_reducer(dealt_state, action, flags, metadata)

        assert [entry.text for entry in state.log[-3:]] == [
            "Alice took: 1:02",
            "Bob took: 0:05",
            "The total game duration was: 1:07",
        ]

    def test_note_list_changes_nothing(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, ActionNoteList(notes=("r1",)), flags, metadata)

        assert state == dealt_state
        assert state is not dealt_state

    def test_draw_out_of_range_fails(self, empty_state, metadata, flags):
        action = ActionDraw(player_index=0, order=99)
        with pytest.raises(InvalidInputError):
            game_state_reducer(empty_state, action, flags, metadata)

    def test_hidden_draw_has_no_identity(self, empty_state, metadata, flags):
        action = ActionDraw(player_index=0, order=0)
        state = game_state_reducer(empty_state, action, flags, metadata)

        assert state.deck[0].identity is None
        assert state.deck[0].location == CardLocation.HAND


class TestSoundEffectCounters:
    """Consecutive blind plays and misplays."""

    def test_consecutive_blind_misplays_then_clue(self, dealt_state, metadata):
        first = ActionDiscard(player_index=0, order=0, suit_index=0, rank=1, failed=True)
        second = ActionDiscard(player_index=0, order=1, suit_index=1, rank=1, failed=True)

        after_first = reduce_all(dealt_state, [first], metadata)
        assert after_first.stats.num_subsequent_blind_plays == 1
        assert after_first.stats.num_subsequent_misplays == 1

        after_second = reduce_all(after_first, [second], metadata)
        assert after_second.stats.num_subsequent_blind_plays == 2
        assert after_second.stats.num_subsequent_misplays == 2

        after_clue = reduce_all(after_second, [FIVES_TO_BOB], metadata)
        assert after_clue.stats.num_subsequent_blind_plays == 0
        assert after_clue.stats.num_subsequent_misplays == 0

    def test_regular_discard_resets_counters(self, dealt_state, metadata):
        state = reduce_all(dealt_state, [
            ActionPlay(player_index=0, order=0, suit_index=0, rank=1),
            ActionDiscard(player_index=0, order=1, suit_index=1, rank=1),
        ], metadata)

        assert state.stats.num_subsequent_blind_plays == 0
        assert state.stats.num_subsequent_misplays == 0

    def test_play_of_clued_card_is_not_blind(self, dealt_state, metadata):
        state = reduce_all(dealt_state, [
            FIVES_TO_BOB,
            ActionPlay(player_index=1, order=9, suit_index=1, rank=5),
        ], metadata)

        assert state.stats.num_subsequent_blind_plays == 0


class TestDoubleDiscard:
    """Double-discard alerts flow from the stats into the cards."""

    def test_discarding_a_two_warns_the_next_player(self, dealt_state, metadata):
        state = reduce_all(dealt_state, [
            FIVES_TO_BOB,
            ActionDiscard(player_index=1, order=5, suit_index=0, rank=2),
        ], metadata)

        assert state.stats.double_discard == 5
        assert all(state.deck[order].in_double_discard for order in state.hands[0])
        assert not any(state.deck[order].in_double_discard for order in state.hands[1])

    def test_alert_survives_the_draw_and_clears_on_clue(self, dealt_state, metadata):
        state = reduce_all(dealt_state, [
            FIVES_TO_BOB,
            ActionDiscard(player_index=1, order=5, suit_index=0, rank=2),
            ActionDraw(player_index=1, order=10, suit_index=2, rank=2),
        ], metadata)

        assert state.turn.current_player_index == 0
        assert state.stats.double_discard == 5
        assert all(state.deck[order].in_double_discard for order in state.hands[0])

        clue = ActionClue(
            clue=Clue(type=ClueType.COLOR, value=0),
            giver=0,
            target=1,
            touched=(6, 7, 8),
        )
        state = reduce_all(state, [clue], metadata)

        assert state.stats.double_discard is None
        assert not any(card.in_double_discard for card in state.deck)

    def test_discarding_a_one_is_safe(self, dealt_state, metadata):
        state = reduce_all(dealt_state, [
            ActionDiscard(player_index=0, order=0, suit_index=0, rank=1),
        ], metadata)

        assert state.stats.double_discard is None


class TestInvariants:
    """Properties that hold for every action."""

    def test_determinism(self, dealt_state, metadata, flags):
        first = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        second = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)

        assert first == second
        assert snapshot_json(first) == snapshot_json(second)

    def test_failed_action_leaves_state_untouched(self, empty_state, metadata, flags):
        before = snapshot_json(empty_state)
        with pytest.raises(StateConsistencyError):
            game_state_reducer(empty_state, FIVES_TO_BOB, flags, metadata)

        assert snapshot_json(empty_state) == before
        assert empty_state.clue_tokens == 8

    def test_prior_state_is_never_mutated(self, dealt_state, metadata, flags):
        before = snapshot_json(dealt_state)
        game_state_reducer(
            dealt_state,
            ActionPlay(player_index=0, order=0, suit_index=0, rank=1),
            flags,
            metadata,
        )
        assert snapshot_json(dealt_state) == before

    def test_each_card_in_one_place(self, dealt_state, metadata):
        state = reduce_all(dealt_state, red_stack_actions() + [
            ActionDiscard(player_index=0, order=1, suit_index=1, rank=1),
        ], metadata)

        for order in range(len(state.deck)):
            places = (
                sum(hand.count(order) for hand in state.hands)
                + sum(stack.count(order) for stack in state.play_stacks)
                + sum(stack.count(order) for stack in state.discard_stacks)
                + state.hole.count(order)
            )
            assert places <= 1

    def test_score_and_clue_tokens_stay_in_bounds(self, dealt_state, metadata, flags):
        state = game_state_reducer(dealt_state, FIVES_TO_BOB, flags, metadata)
        previous_score = state.score
        for action in red_stack_actions():
            state = game_state_reducer(state, action, flags, metadata)
            assert state.score >= previous_score
            assert 0 <= state.clue_tokens <= 8
            previous_score = state.score

    def test_every_action_type_has_a_handler(self):
        assert set(ACTION_HANDLERS) == set(ActionType)

    def test_derivation_stage_order(self):
        assert [name for name, _ in DERIVATION_STAGES] == [
            "cards",
            "stack_directions",
            "stack_starts",
            "card_status",
            "turn",
            "stats",
            "double_discard",
            "known_trash",
        ]


class TestReducerWrapper:
    """Tests for the result-returning Reducer."""

    def test_success_reports_new_log_lines(self, dealt_state, metadata):
        result = apply_action(dealt_state, FIVES_TO_BOB, metadata)

        assert result.success
        assert result.new_state.clue_tokens == 7
        assert result.log_entries == ["Alice tells Bob about two fives"]

    def test_failure_has_error_code(self, empty_state, metadata):
        result = Reducer(metadata=metadata).apply(empty_state, FIVES_TO_BOB)

        assert not result.success
        assert result.new_state is None
        assert result.error_code == "STATE_CONSISTENCY"
        assert "initial cards" in result.error

    def test_invalid_input_code(self, dealt_state, metadata):
        action = ActionPlay(player_index=0, order=0, suit_index=-1, rank=-1)
        result = apply_action(dealt_state, action, metadata)

        assert not result.success
        assert result.error_code == "INVALID_INPUT"
