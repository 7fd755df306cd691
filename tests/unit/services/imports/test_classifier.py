from tracker.services.imports.classifier import classify, match_header, normalize_header


def test_header_row_maps_labelled_columns_in_any_order():
    rows = [
        ["Phone Number", "Company", "Full Name", "Designation", "E-mail Address"],
        ["555-0100", "Acme", "Alice", "CTO", "alice@acme.com"],
    ]

    detection = classify(rows)

    assert detection.method == "header"
    assert detection.header_row == 1
    assert detection.data_start_row == 2
    assert detection.field_map.as_dict() == {
        "name": 3,
        "email": 5,
        "phone": 1,
        "company": 2,
        "designation": 4,
    }


def test_header_row_found_below_title_rows():
    rows = [
        ["Contacts export 2024"],
        [],
        ["Name", "Email", "Mobile No."],
        ["Alice", "alice@acme.com", "5550100"],
    ]

    detection = classify(rows)

    assert detection.header_row == 3
    assert detection.data_start_row == 4
    assert detection.field_map.phone == 3


def test_first_column_wins_for_repeated_field():
    rows = [["Name", "Email", "Work Email", "Phone"]]

    detection = classify(rows)

    assert detection.field_map.email == 2


def test_single_recognised_header_is_not_a_header_row():
    rows = [["Email", "Notes"], ["alice@acme.com", "met at expo"]]

    detection = classify(rows)

    assert detection.header_row is None
    assert detection.data_start_row == 1


def test_content_sniffing_without_headers():
    rows = [["jane@x.com", "Jane Doe", "555-0100"]]

    detection = classify(rows)

    assert detection.method == "content"
    assert detection.data_start_row == 1
    assert detection.field_map.email == 1
    assert detection.field_map.name == 2
    assert detection.field_map.phone == 3
    assert detection.field_map.company == 4
    assert detection.field_map.designation == 5


def test_unclassifiable_sheet_falls_back_to_positions():
    rows = [["12", "ab"]]

    detection = classify(rows)

    assert detection.method == "positional"
    assert detection.field_map.as_dict() == {
        "name": 1,
        "email": 2,
        "phone": 3,
        "company": 4,
        "designation": 5,
    }


def test_header_scan_is_limited_to_leading_rows():
    rows = [["x"]] * 10 + [["Name", "Email"]]

    detection = classify(rows)

    assert detection.header_row is None


def test_normalize_header_strips_separators():
    assert normalize_header(" Job_Title ") == "jobtitle"
    assert normalize_header("E-mail.Address") == "emailaddress"
    assert normalize_header(None) == ""


def test_match_header_families():
    assert match_header("fullname") == "name"
    assert match_header("contactname") == "name"
    assert match_header("contactnumber") == "phone"
    assert match_header("organization") == "company"
    assert match_header("jobtitle") == "designation"
    assert match_header("notes") is None
