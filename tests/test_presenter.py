from docrerank import RankedResult, format_score, results_to_csv, score_to_progress


def test_format_score_uses_three_decimals():
    assert format_score(0.91) == "Relevance Score: 0.910"
    assert format_score(0.123456) == "Relevance Score: 0.123"


def test_score_to_progress_is_proportional_and_clamped():
    assert score_to_progress(0.0) == 0
    assert score_to_progress(0.42) == 42
    assert score_to_progress(1.0) == 100
    assert score_to_progress(1.5) == 100


def test_export_has_header_plus_one_line_per_result():
    results = [
        RankedResult(text="Refunds take 5 days", score=0.91),
        RankedResult(text="Shipping is free", score=0.42),
    ]

    lines = results_to_csv(results).split("\n")

    assert lines == [
        "Text,Relevance Score",
        "Refunds take 5 days,0.91",
        "Shipping is free,0.42",
    ]


def test_export_of_no_results_is_header_only():
    assert results_to_csv([]) == "Text,Relevance Score"


def test_export_round_trips_text_and_score_without_commas():
    results = [RankedResult(text="plain text", score=0.123456789)]

    row = results_to_csv(results).split("\n")[1]
    text, score = row.rsplit(",", 1)

    assert text == "plain text"
    assert float(score) == 0.123456789


def test_export_does_not_escape_embedded_commas():
    results = [RankedResult(text="one, two", score=0.5)]

    row = results_to_csv(results).split("\n")[1]

    assert row == "one, two,0.5"
