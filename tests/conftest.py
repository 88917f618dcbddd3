import pytest


def make_row(**cells) -> dict:
    """Row with sheet headers; keyword names use underscores for spaces."""
    defaults = {
        "Bed Available": "Yes",
        "Male / Female": "Male",
        "Ac / Non AC": "AC",
        "Sharing Type": "Double",
        "Location": "Ghansoli",
        "Attached Bathroom": "Yes",
        "Client Vacating Date": "",
    }
    aliases = {
        "bed": "Bed Available",
        "gender": "Male / Female",
        "ac": "Ac / Non AC",
        "sharing": "Sharing Type",
        "location": "Location",
        "bathroom": "Attached Bathroom",
        "vacating": "Client Vacating Date",
    }
    row = dict(defaults)
    for key, value in cells.items():
        column = aliases.get(key, key)
        if value is None:
            row.pop(column, None)
        else:
            row[column] = value
    return row


@pytest.fixture
def rows():
    return [
        make_row(**{"PG ID": "PG1"}, location="Ghansoli", ac="AC", sharing="Double", gender="Male"),
        make_row(**{"PG ID": "PG2"}, location="Ghansoli", ac="Non AC", sharing="Triple", gender="Female"),
        make_row(**{"PG ID": "PG3"}, location="CBD Belapur", ac="AC", sharing="Triple", gender="Male",
                 bathroom="No"),
        make_row(**{"PG ID": "PG4"}, location="Vashi", ac="ac", sharing="Private", gender="female"),
        make_row(**{"PG ID": "PG5"}, location="Ghansoli", ac="AC", sharing="Quad", bed="No"),
        make_row(**{"PG ID": "PG6"}, location="Nerul ( E )", ac="Non AC", sharing="Double", bed="YES"),
    ]


def ids(rows):
    return [r["PG ID"] for r in rows]
