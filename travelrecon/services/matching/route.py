"""Origin/destination route comparison."""

from dataclasses import dataclass, field

from travelrecon.models import present

from .text import similarity

# A leg above this similarity is reported as a match
LEG_MATCH_THRESHOLD = 0.7

# Discount when only one leg can be compared
PARTIAL_ROUTE_FACTOR = 0.8


@dataclass
class RouteMatch:
    """Route subscore with per-leg explanations."""

    score: float = 0.0
    reasons: list[str] = field(default_factory=list)
    comparable: bool = False


def match_route(
    booking_origin: str | None,
    booking_destination: str | None,
    expense_origin: str | None,
    expense_destination: str | None,
) -> RouteMatch:
    """Compare the booked route with the route on an expense.

    Both legs comparable: the average of the leg scores. One leg comparable:
    that leg's score discounted by PARTIAL_ROUTE_FACTOR.
    """
    booking_origin, expense_origin = present(booking_origin), present(expense_origin)
    booking_destination = present(booking_destination)
    expense_destination = present(expense_destination)

    result = RouteMatch()
    leg_scores = []

    if booking_origin and expense_origin:
        origin_score = similarity(booking_origin, expense_origin)
        leg_scores.append(origin_score)
        if origin_score > LEG_MATCH_THRESHOLD:
            result.reasons.append(f"Origin match: {booking_origin} - {expense_origin}")

    if booking_destination and expense_destination:
        dest_score = similarity(booking_destination, expense_destination)
        leg_scores.append(dest_score)
        if dest_score > LEG_MATCH_THRESHOLD:
            result.reasons.append(
                f"Destination match: {booking_destination} - {expense_destination}"
            )

    if not leg_scores:
        return result

    result.comparable = True
    if len(leg_scores) == 2:
        result.score = sum(leg_scores) / 2
    else:
        result.score = leg_scores[0] * PARTIAL_ROUTE_FACTOR
    return result
