"""Round and match scoring rules."""

from decimal import Decimal

from .models import Winner


def determine_round_winner(human_value: Decimal, ai_value: Decimal) -> Winner:
    """Strictly higher final value wins; equal values tie."""
    if human_value > ai_value:
        return Winner.HUMAN
    if ai_value > human_value:
        return Winner.AI
    return Winner.TIE


def determine_match_winner(human_wins: int, ai_wins: int) -> Winner:
    """More round wins takes the match; equal counts are a tie."""
    if human_wins > ai_wins:
        return Winner.HUMAN
    if ai_wins > human_wins:
        return Winner.AI
    return Winner.TIE


def majority_threshold(max_rounds: int) -> int:
    """Round wins needed to clinch the match: ceil(max_rounds / 2)."""
    return (max_rounds + 1) // 2


def is_match_over(current_round: int, max_rounds: int, human_wins: int, ai_wins: int) -> bool:
    """True after the last round or once either side holds a majority."""
    threshold = majority_threshold(max_rounds)
    return (
        current_round >= max_rounds
        or human_wins >= threshold
        or ai_wins >= threshold
    )
