import csv
import io
from collections.abc import Iterable

from src.guests.dtos import IndividualDTO

CSV_HEADERS = [
    "Invitation Code",
    "Group Name",
    "First Name",
    "Last Name",
    "RSVP Status",
    "Dietary Restrictions",
    "Comments",
    "Created",
    "Updated",
]

CSV_FILENAME = "wedding-rsvps.csv"


def individual_row(individual: IndividualDTO) -> list[str]:
    return [
        individual.invitation_code,
        individual.group_name,
        individual.first_name,
        individual.last_name,
        individual.rsvp_status.value,
        "; ".join(restriction.value for restriction in individual.dietary_restrictions),
        individual.comments or "",
        individual.created_at.date().isoformat(),
        individual.updated_at.date().isoformat(),
    ]


def export_individuals_csv(individuals: Iterable[IndividualDTO]) -> str:
    """Render individuals as CSV text, one row each after a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for individual in individuals:
        writer.writerow(individual_row(individual))
    return buffer.getvalue()
