"""Progressive bracket tax computation.

Tables store, for each bracket, the cumulative tax owed on all lower
brackets (``flat_amount``). Tax on an income is then a single lookup:
the flat amount of the bracket the income falls in plus the marginal rate
applied to the slice above the bracket's floor.
"""

from typing import List, Optional, Sequence, Protocol

# Tolerance when checking stored flat amounts against computed ones
FLAT_AMOUNT_TOLERANCE = 0.01


class Bracket(Protocol):
    min: float
    max: Optional[float]
    rate: float
    flat_amount: Optional[float]


def calculate_progressive_tax(annual_income: float, brackets: Sequence[Bracket]) -> float:
    """Calculate annual tax on an income using a bracket table.

    Scans from the top bracket down and uses the first bracket whose floor
    lies below the income. Lower brackets are not summed here; their tax is
    already carried in the selected bracket's flat_amount.

    Args:
        annual_income: Annualized taxable income
        brackets: Brackets ordered ascending by min

    Returns:
        Annual tax (unrounded). Zero for zero or negative income.
    """
    if annual_income <= 0:
        return 0.0

    for bracket in reversed(brackets):
        if annual_income > bracket.min:
            upper = bracket.max if bracket.max is not None else annual_income
            taxable_in_bracket = min(annual_income, upper) - bracket.min
            return (bracket.flat_amount or 0.0) + taxable_in_bracket * bracket.rate

    return 0.0


def compute_flat_amounts(brackets: Sequence[Bracket]) -> List[float]:
    """Compute the cumulative tax below each bracket.

    Example:
        10% to 11600, 12% to 47150, 22% above -> [0, 1160, 5426]
    """
    amounts = []
    cumulative = 0.0
    for bracket in brackets:
        amounts.append(cumulative)
        if bracket.max is not None:
            cumulative += (bracket.max - bracket.min) * bracket.rate
    return amounts


def check_bracket_sequence(brackets: Sequence[Bracket]) -> List[str]:
    """Check that brackets form one contiguous ascending schedule.

    Returns:
        List of problems found (empty if the sequence is valid)
    """
    problems = []
    if not brackets:
        return ["no brackets defined"]

    if brackets[0].min != 0:
        problems.append(f"first bracket must start at 0, starts at {brackets[0].min}")

    for i, bracket in enumerate(brackets):
        is_last = i == len(brackets) - 1
        if bracket.max is None and not is_last:
            problems.append(f"bracket {i} has no max but is not the top bracket")
        if bracket.max is not None and bracket.max <= bracket.min:
            problems.append(f"bracket {i} max {bracket.max} is not above min {bracket.min}")
        if i > 0 and brackets[i - 1].max is not None and bracket.min != brackets[i - 1].max:
            problems.append(
                f"bracket {i} starts at {bracket.min}, expected {brackets[i - 1].max}"
            )

    return problems


def fill_flat_amounts(brackets: Sequence[Bracket]) -> List[str]:
    """Fill missing flat amounts and verify the ones provided.

    Brackets without a flat_amount get the computed cumulative value.
    Brackets with one are checked against it.

    Returns:
        List of mismatches found (empty if every flat amount agrees)
    """
    problems = []
    for i, (bracket, expected) in enumerate(zip(brackets, compute_flat_amounts(brackets))):
        if bracket.flat_amount is None:
            bracket.flat_amount = expected
        elif abs(bracket.flat_amount - expected) > FLAT_AMOUNT_TOLERANCE:
            problems.append(
                f"bracket {i} flat_amount {bracket.flat_amount} does not match "
                f"cumulative tax below it ({expected:.2f})"
            )
    return problems
