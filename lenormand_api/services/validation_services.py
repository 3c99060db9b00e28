# lenormand_api/services/validation_services.py
from typing import Any, List

from lenormand_api.data.lenormand import lenormand_cards, themes, timeframes


def _is_member(value: Any, vocabulary: frozenset) -> bool:
    return isinstance(value, str) and bool(value) and value in vocabulary


def validate_input(card1: Any, card2: Any, timeframe: Any, theme: Any) -> List[str]:
    """
    Check the four reading fields against their closed vocabularies.

    Values are compared verbatim: no trimming and no case folding, so
    "o cavaleiro" or "O Sol " are reported as invalid. Returns the error
    messages in field order; an empty list means the input is valid.
    """
    errors = []

    if not _is_member(card1, lenormand_cards):
        errors.append(f"Carta1 inválida: {card1}")
    if not _is_member(card2, lenormand_cards):
        errors.append(f"Carta2 inválida: {card2}")
    if not _is_member(timeframe, timeframes):
        errors.append(f"Tempo inválido: {timeframe}")
    if not _is_member(theme, themes):
        errors.append(f"Tema inválido: {theme}")

    return errors
