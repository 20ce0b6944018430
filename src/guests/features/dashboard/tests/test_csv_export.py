import csv
import io
from dataclasses import replace
from datetime import datetime, timezone

from src.guests.dtos import DietaryRestriction, RSVPStatus
from src.guests.features.dashboard.csv_export import CSV_HEADERS, export_individuals_csv
from src.guests.repository.tests.inmemory_models import create_test_individual


def test_header_only_for_empty_collection():
    assert export_individuals_csv([]) == ",".join(CSV_HEADERS) + "\n"


def test_row_values():
    individual = replace(
        create_test_individual(
            "John",
            "Doe",
            "ABC12",
            "Doe Family",
            RSVPStatus.ACCEPTED,
            [DietaryRestriction.GLUTEN_FREE, DietaryRestriction.VEGAN],
            comments=None,
        ),
        created_at=datetime(2026, 5, 1, 9, 30, tzinfo=timezone.utc),
        updated_at=datetime(2026, 6, 2, 18, 0, tzinfo=timezone.utc),
    )

    lines = export_individuals_csv([individual]).splitlines()

    assert lines[1] == "ABC12,Doe Family,John,Doe,Accepted,Gluten-free; Vegan,,2026-05-01,2026-06-02"


def test_commas_and_quotes_are_escaped():
    individual = create_test_individual(
        "John",
        "Doe",
        group_name="Doe, Smith & Co",
        comments='Says "hi", bringing cake',
    )

    text = export_individuals_csv([individual])

    assert '"Doe, Smith & Co"' in text
    assert '"Says ""hi"", bringing cake"' in text

    rows = list(csv.reader(io.StringIO(text)))
    assert rows[1][1] == "Doe, Smith & Co"
    assert rows[1][6] == 'Says "hi", bringing cake'
