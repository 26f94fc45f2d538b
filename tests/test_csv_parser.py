import csv

import pytest

from import_engine.csv_parser import CsvParseError, decode, detect_delimiter, parse_rows


@pytest.mark.parametrize("line, expected", [
    ("Nom|Niveau|Ecole", "|"),
    ("Nom;Niveau;Ecole", ";"),
    ("Nom\tNiveau\tEcole", "\t"),
    ("Nom,Niveau,Ecole", ","),
    ("Nom", ","),
    ("", ","),
    ("a;b|c", ","),          # tie for first place
    ("a;b;c,d", ";"),
])
def test_detect_delimiter(line, expected):
    assert detect_delimiter(line) == expected


def test_semicolon_file_is_split_on_semicolons():
    rows = parse_rows("Nom;Niveau\nBouclier;1\n")
    assert rows == [{"Nom": "Bouclier", "Niveau": "1"}]


def test_bom_is_stripped_from_first_header():
    rows = parse_rows(b"\xef\xbb\xbfNom,Niveau\r\nLumi\xc3\xa8re,0\r\n")
    assert list(rows[0]) == ["Nom", "Niveau"]
    assert rows[0]["Nom"] == "Lumière"


def test_decode_strips_bom_from_text():
    assert decode("\ufeffNom") == "Nom"


def test_headers_are_trimmed():
    rows = parse_rows(" Nom , Niveau \nFlou,2\n")
    assert list(rows[0]) == ["Nom", "Niveau"]


def test_blank_and_whitespace_lines_are_skipped():
    rows = parse_rows("Nom,Niveau\n\nFlou,2\n   \n,\nSommeil,1\n")
    assert [r["Nom"] for r in rows] == ["Flou", "Sommeil"]


def test_short_rows_are_padded_with_empty_strings():
    rows = parse_rows("Nom,Niveau,Ecole\nFlou\n")
    assert rows == [{"Nom": "Flou", "Niveau": "", "Ecole": ""}]


def test_extra_cells_are_ignored():
    rows = parse_rows("Nom,Niveau\nFlou,2,Illusion\n")
    assert rows == [{"Nom": "Flou", "Niveau": "2"}]


def test_quoted_fields_keep_delimiters_and_newlines():
    text = 'Nom,Description\n"Bouclier","Une barrière, invisible.\nDeuxième ligne"\n'
    rows = parse_rows(text)
    assert rows[0]["Description"] == "Une barrière, invisible.\nDeuxième ligne"


def test_escaped_quotes():
    rows = parse_rows('Nom,Description\nMot,"Il dit ""stop"""\n')
    assert rows[0]["Description"] == 'Il dit "stop"'


def test_header_only_and_empty_input():
    assert parse_rows("Nom,Niveau\n") == []
    assert parse_rows("") == []
    assert parse_rows(b"   \n\n") == []


def test_explicit_delimiter_wins_over_sniffing():
    rows = parse_rows("a;b,c\n1;2,3\n", delimiter=",")
    assert rows == [{"a;b": "1;2", "c": "3"}]


def test_oversized_field_is_a_parse_error():
    huge = "x" * (csv.field_size_limit() + 1)
    with pytest.raises(CsvParseError):
        parse_rows(f"Nom,Niveau\n{huge},2\n")
